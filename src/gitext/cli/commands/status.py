"""``gitext status`` - read-only summary of the current branch."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_status


def status(ctx: typer.Context) -> None:
    """Show branch, cleanliness, ahead/behind counts and suggested next steps."""
    policy, executor = prepare_engine(ctx)
    finish(run_status(policy, executor))
