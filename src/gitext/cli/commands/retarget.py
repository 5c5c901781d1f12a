"""``gitext retarget feature`` - move a feature branch from stage onto production."""

from __future__ import annotations

import typer

from gitext.cli.helpers import finish, prepare_engine
from gitext.workflows import run_retarget

app = typer.Typer(name="retarget", help="Retarget work branches", no_args_is_help=True)


@app.command("feature")
def retarget_feature(
    ctx: typer.Context,
    onto: str = typer.Option("production", "--onto", help="Branch to rebase onto"),
    source: str = typer.Option("stage", "--from", help="Branch the feature was started from"),
    override: bool = typer.Option(False, "--override", help="Skip the feature branch pattern check"),
    i_know: bool = typer.Option(
        False,
        "--i-know-what-im-doing",
        help="Retarget even if other people have committed to this branch",
    ),
) -> None:
    """Replay only the feature's own commits onto production.

    Runs ``git rebase --onto <remote>/production <remote>/stage``, leaving stage
    commits behind. Refuses shared branches unless acknowledged.
    """
    policy, executor = prepare_engine(ctx)
    finish(
        run_retarget(
            policy,
            executor,
            onto=onto,
            source=source,
            override=override,
            acknowledge_shared=i_know,
        )
    )
