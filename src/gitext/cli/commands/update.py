"""``gitext update feature`` - bring a feature branch up to date."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_update

app = typer.Typer(name="update", help="Update work branches", no_args_is_help=True)


@app.command("feature")
def update_feature(
    ctx: typer.Context,
    source: str = typer.Option("stage", "--with", help="Branch to update with: stage or production"),
    mode: str = typer.Option("rebase", "--mode", help="Integration mode: rebase or merge"),
) -> None:
    """Rebase (default) or merge the latest stage/production into the current feature branch.

    Conflicts exit with status 2 and print the command that continues the
    interrupted operation.
    """
    policy, executor = prepare_engine(ctx)
    finish(run_update(policy, source, mode, executor))
