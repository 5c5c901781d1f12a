from gitext import main

main()
