"""``gitext start feature`` - create a feature branch from a protected branch."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_start

app = typer.Typer(name="start", help="Start new work branches", no_args_is_help=True)


@app.command("feature")
def start_feature(
    ctx: typer.Context,
    ticket: str = typer.Option("", "--ticket", help="Ticket id, e.g. KWS-123"),
    slug: str = typer.Option("", "--slug", help="Short description, e.g. retry-policy"),
    source: str = typer.Option("stage", "--from", help="Branch to start from: stage or production"),
) -> None:
    """Create feature/<ticket>-<slug> from the latest stage or production."""
    policy, executor = prepare_engine(ctx)
    finish(run_start(policy, ticket, slug, source, executor))
