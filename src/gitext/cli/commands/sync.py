"""``gitext sync`` - fast-forward a protected branch from the remote."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_sync


def sync(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Branch to sync: stage or production"),
) -> None:
    """Fast-forward stage or production to match the remote.

    Never merges or rebases; a diverged branch is reported with the command
    that reconciles it.
    """
    policy, executor = prepare_engine(ctx)
    finish(run_sync(policy, target, executor))
