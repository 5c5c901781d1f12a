"""Report, and optionally delete, local branches already merged."""

from __future__ import annotations

import logging

from gitext.core.errors import GitextError
from gitext.core.executor import CommandExecutor
from gitext.core.inspector import dedupe
from gitext.core.policy import Policy

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_cleanup", "collect_merged_branches"]


def collect_merged_branches(ctx: WorkflowContext, tracker: StepTracker, result: WorkflowResult) -> list[str]:
    """Union of branches merged into stage and production, minus the current branch."""
    policy = ctx.policy
    current = ctx.inspector.current_branch()
    merged: list[str] = []
    for into in (policy.stage_branch, policy.production_branch):
        key = f"merged:{into}"
        tracker.add(key, f"Branches merged into {into}")
        tracker.start(key)
        if not ctx.inspector.has_ref(f"refs/heads/{into}"):
            tracker.skip(key, "no local branch")
            result.warnings.append(f"{into} does not exist locally; skipped")
            continue
        branches = ctx.inspector.merged_branches(into)
        merged.extend(branches)
        tracker.complete(key, f"{len(branches)} found")
    return [branch for branch in dedupe(merged) if branch != current]


def run_cleanup(policy: Policy, executor: CommandExecutor, *, hard: bool = False) -> WorkflowResult:
    """List merged branches; with ``hard`` delete them.

    Protected branches are left out of the list and reported as warnings.

    Deletion tries ``branch -d`` first and falls back to ``branch -D`` for
    branches merged by squash or rebase. Protected branches are never deleted.
    """
    tracker = StepTracker("Cleanup merged branches")
    result = WorkflowResult("cleanup", tracker)
    ctx = WorkflowContext(policy, executor)

    try:
        candidates = collect_merged_branches(ctx, tracker, result)
        result.state = ctx.inspector.snapshot(policy.remote_name)
    except GitextError as e:
        return result.fail(e)

    if not candidates:
        return result.succeed("No merged branches to clean up")

    if not hard:
        deletable = [branch for branch in candidates if branch not in policy.protected_branches]
        for branch in candidates:
            if branch not in deletable:
                result.warnings.append(f"{branch} is protected and will be kept")
        if not deletable:
            return result.succeed("No merged branches to clean up")
        result.items.extend(deletable)
        return result.succeed(
            f"Found {len(deletable)} merged branch(es); nothing deleted",
            next_command="run with --hard to delete these branches: gitext cleanup --hard",
        )

    deleted: list[str] = []
    for branch in candidates:
        key = f"delete:{branch}"
        tracker.add(key, f"Delete {branch}")
        if branch in policy.protected_branches:
            tracker.skip(key, "protected")
            result.warnings.append(f"Skipping protected branch: {branch}")
            continue

        tracker.start(key)
        safe = executor.execute(["branch", "-d", branch])
        if safe.ok:
            deleted.append(branch)
            tracker.complete(key, "dry run" if safe.skipped else "")
            continue

        logger.info("Safe delete of %s failed, forcing", branch)
        forced = executor.execute(["branch", "-D", branch])
        if forced.ok:
            deleted.append(branch)
            tracker.complete(key, "forced")
        else:
            tracker.error(key, "delete failed")
            result.warnings.append(f"Failed to delete {branch}: {forced.error}")

    result.items.extend(deleted)
    return result.succeed(
        f"Deleted {len(deleted)} branch(es)",
        next_command="run: gitext status",
    )
