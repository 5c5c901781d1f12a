"""``gitext prepare pr`` - run CI checks and generate pull request text."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_prepare_pr

app = typer.Typer(name="prepare", help="Prepare work for review", no_args_is_help=True)


@app.command("pr")
def prepare_pr(
    ctx: typer.Context,
    target: str = typer.Option("stage", "--to", help="PR target: stage or production"),
) -> None:
    """Run the configured CI commands for the target, then print PR text."""
    policy, executor = prepare_engine(ctx)
    finish(run_prepare_pr(policy, target, executor))
