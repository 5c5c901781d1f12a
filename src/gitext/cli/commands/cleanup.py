"""``gitext cleanup`` - list or delete branches already merged into protected branches."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_cleanup


def cleanup(
    ctx: typer.Context,
    hard: bool = typer.Option(False, "--hard", help="Actually delete the merged branches"),
) -> None:
    """List local branches merged into stage or production (delete with --hard)."""
    policy, executor = prepare_engine(ctx)
    finish(run_cleanup(policy, executor, hard=hard))
