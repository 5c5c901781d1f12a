"""Prepare a pull request: run the target's CI commands, then render PR text."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from gitext.core.constants import CI_TIMEOUT_SECONDS
from gitext.core.errors import ExecutionError, GitextError
from gitext.core.executor import CommandExecutor, ExecutorOptions
from gitext.core.inspector import RepositoryInspector
from gitext.core.policy import Policy

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_prepare_pr", "extract_ticket", "render_pr_text"]


def extract_ticket(branch: str) -> str | None:
    """Pull a ticket id out of a branch name.

    Example: feature/KWS-123-retry-policy → KWS-123
    """
    parts = branch.split("/", 1)
    if len(parts) < 2:
        return None
    name_parts = parts[1].split("-")
    if len(name_parts) >= 2 and len(name_parts[0]) >= 2 and name_parts[1]:
        return f"{name_parts[0]}-{name_parts[1]}"
    return None


def _read_template(policy: Policy, repo_root: Path | None) -> str | None:
    if not policy.pr_template_path or repo_root is None:
        return None
    template = repo_root / policy.pr_template_path
    try:
        return template.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"PR template not readable: {template}: {e}")
        return None


def render_pr_text(
    branch: str,
    target_branch: str,
    commits: list[str] | None,
    template: str | None = None,
) -> str:
    lines: list[str] = []
    if template:
        lines.append(template.rstrip("\n"))
        lines.append("")
        lines.append("---")
        lines.append("")

    lines.append(f"## Branch: {branch}")
    lines.append("")
    ticket = extract_ticket(branch)
    if ticket:
        lines.append(f"**Ticket:** {ticket}")
        lines.append("")
    lines.append(f"**Target:** {target_branch}")
    lines.append("")

    if commits is not None:
        lines.append("## Commits")
        lines.append("")
        if commits:
            lines.extend(f"- {commit}" for commit in commits)
        else:
            lines.append("No commits (branch is up to date or behind)")
        lines.append("")

    lines.append("## Description")
    lines.append("")
    lines.append("<!-- Add description here -->")
    return "\n".join(lines) + "\n"


def run_ci_commands(
    commands: tuple[str, ...],
    options: ExecutorOptions,
    tracker: StepTracker,
    cwd: Path | None,
) -> None:
    """Run each CI command in order; the first failure raises."""
    ci = CommandExecutor(
        ExecutorOptions(dry_run=options.dry_run, verbose=options.verbose, timeout=CI_TIMEOUT_SECONDS),
        binary=None,
        cwd=cwd,
    )
    for index, command in enumerate(commands):
        key = f"ci:{index}"
        tracker.add(key, command)
        tracker.start(key)
        argv = shlex.split(command)
        if not argv:
            tracker.skip(key, "empty")
            continue
        outcome = ci.execute(argv)
        if outcome.error is not None:
            raise outcome.error
        tracker.complete(key, "dry run" if outcome.skipped else "passed")


def run_prepare_pr(policy: Policy, target: str, executor: CommandExecutor) -> WorkflowResult:
    tracker = StepTracker(f"Prepare PR to {target}")
    result = WorkflowResult("prepare", tracker)
    ctx = WorkflowContext(policy, executor)
    inspector: RepositoryInspector = ctx.inspector

    try:
        target_branch = policy.branch_for(target, option="--to")
        current = inspector.current_branch()
        commands = policy.ci_for(target)

        if commands:
            try:
                run_ci_commands(commands, executor.options, tracker, policy.repo_root)
            except ExecutionError as e:
                return result.fail(e, message=f"CI check failed: {' '.join(e.command_args)}")
        else:
            result.warnings.append(f"No CI commands configured for {target}")

        tracker.add("text", "Generate PR text")
        tracker.start("text")
        base_ref = policy.remote_ref(target_branch)
        commits = inspector.commit_summary(base_ref, current) if inspector.has_ref(base_ref) else None
        repo_root = policy.repo_root or inspector.repo_root()
        text = render_pr_text(current, target_branch, commits, _read_template(policy, repo_root))
        tracker.complete("text")
        result.state = inspector.snapshot(policy.remote_name)
    except GitextError as e:
        return result.fail(e)

    result.body = text
    return result.succeed(
        "PR text generated",
        next_command="create the PR on your git host or copy the text above",
    )
