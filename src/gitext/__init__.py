#!/usr/bin/env python3
"""
gitext - safe git workflow automation for stage/production branching.

Usage:
    gitext sync stage
    gitext start feature --ticket KWS-123 --slug retry-policy
    gitext update feature --with stage
    gitext retarget feature --onto production --from stage
    gitext --dry-run cleanup --hard
"""

from __future__ import annotations

import typer

from gitext.cli.helpers import CliOptions, console

__version__ = "0.1.0"

app = typer.Typer(
    name="gitext",
    help="Safe git workflow automation for stage/production branching",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gitext {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print mutating git commands instead of running them",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every git command and its output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the gitext version and exit",
    ),
) -> None:
    """Validate, fetch, then mutate: every workflow checks preconditions first."""
    ctx.obj = CliOptions(dry_run=dry_run, verbose=verbose)


from gitext.cli.commands import register_commands  # noqa: E402

register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
