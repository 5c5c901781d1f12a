"""Shared plumbing for gitext commands: console, global flags, exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from gitext.core.errors import GitextError
from gitext.core.executor import CommandExecutor, ExecutorOptions
from gitext.core.policy import Policy, load_policy
from gitext.workflows.types import OutcomeStatus, WorkflowResult

from .ui import render_result

console = Console(highlight=False)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_RECOVERABLE = 2


@dataclass(frozen=True)
class CliOptions:
    """Global flags from the root callback."""

    dry_run: bool = False
    verbose: bool = False


def _options(ctx: typer.Context) -> CliOptions:
    obj = ctx.find_root().obj
    if isinstance(obj, CliOptions):
        return obj
    return CliOptions()


def fail(error: GitextError) -> NoReturn:
    """Print a fatal error with its suggestion and exit 1."""
    console.print(f"[red]✗  {escape(error.message)}[/red]")
    if error.suggestion:
        console.print(f"[cyan]→ next:[/cyan] {escape(error.suggestion)}")
    raise typer.Exit(EXIT_FAILURE)


def prepare_engine(ctx: typer.Context) -> tuple[Policy, CommandExecutor]:
    """Load the policy and build an executor honouring the global flags.

    Not being inside a repository (or an invalid ``.gitext``) ends the
    command here; every later failure is reported through a WorkflowResult.
    """
    options = _options(ctx)
    try:
        policy = load_policy()
    except GitextError as e:
        fail(e)
    executor = CommandExecutor(
        ExecutorOptions(dry_run=options.dry_run, verbose=options.verbose),
        cwd=policy.repo_root,
        console=console,
    )
    if options.dry_run:
        console.print("[yellow]Dry run: no branches or working-tree files will be changed[/yellow]")
    return policy, executor


def finish(result: WorkflowResult) -> None:
    """Render a workflow result and exit with the matching status code."""
    render_result(result, console)
    if result.status is OutcomeStatus.SUCCESS:
        raise typer.Exit(EXIT_OK)
    if result.status is OutcomeStatus.RECOVERABLE:
        raise typer.Exit(EXIT_RECOVERABLE)
    raise typer.Exit(EXIT_FAILURE)


__all__ = [
    "console",
    "CliOptions",
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_RECOVERABLE",
    "fail",
    "prepare_engine",
    "finish",
]
