"""Reusable UI helpers for gitext CLI output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from gitext.workflows.tracker import StepTracker

__all__ = ["StepTracker", "render_result"]

if TYPE_CHECKING:
    from gitext.workflows.types import WorkflowResult


def render_result(result: "WorkflowResult", console: Console) -> None:
    """Print a workflow's step tree, warnings, outcome and next command."""
    from gitext.workflows.types import OutcomeStatus

    console.print(result.tracker.render())

    for item in result.items:
        console.print(f"  - {escape(item)}")

    if result.body:
        console.print()
        console.print(escape(result.body))

    for warning in result.warnings:
        console.print(f"[yellow]⚠  {escape(warning)}[/yellow]")

    if result.status is OutcomeStatus.SUCCESS:
        console.print(f"[green]✓  {escape(result.message)}[/green]")
    else:
        console.print(f"[red]✗  {escape(result.message)}[/red]")
        output = getattr(result.error, "output", "") or ""
        cause = getattr(result.error, "cause", None)
        if not output and cause is not None:
            output = getattr(cause, "output", "") or ""
        if output:
            console.print(Panel(escape(output), title="git output", border_style="red", expand=False))

    if result.next_command:
        console.print(f"[cyan]→ next:[/cyan] {escape(result.next_command)}")
