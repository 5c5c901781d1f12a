"""Sync a protected branch with its remote using fast-forward-only pulls."""

from __future__ import annotations

import logging

from gitext.core.errors import GitextError
from gitext.core.executor import CommandExecutor
from gitext.core.policy import Policy

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_sync"]


def run_sync(policy: Policy, target: str, executor: CommandExecutor) -> WorkflowResult:
    """Fetch and fast-forward ``target`` (``stage`` or ``production``).

    A protected branch is never rebased automatically: if the pull cannot
    fast-forward, the operation stops and suggests a rebase pull instead.
    """
    tracker = StepTracker(f"Sync {target}")
    result = WorkflowResult("sync", tracker)
    ctx = WorkflowContext(policy, executor)
    remote = policy.remote_name

    try:
        branch = policy.branch_for(target)
        remote_ref = policy.remote_ref(branch)

        tracker.add("remote", f"Remote {remote} reachable")
        tracker.add("clean", "Working tree clean")
        tracker.add("fetch", f"Fetch {remote}")
        tracker.add("checkout", f"Checkout {branch}")
        tracker.add("pull", f"Fast-forward {branch} from {remote_ref}")

        ctx.check_remote(tracker)
        ctx.check_branch(tracker, branch)
        ctx.check_clean(tracker)
        ctx.fetch(tracker)

        tracker.start("checkout")
        if ctx.inspector.current_branch() == branch:
            tracker.skip("checkout", "already on branch")
        else:
            executor.run("checkout", branch)
            tracker.complete("checkout")

        tracker.start("pull")
        pull = executor.execute(["pull", "--ff-only", remote, branch])
        if pull.error is not None:
            logger.warning("Fast-forward pull of %s failed", branch)
            return result.fail(
                pull.error,
                message=f"fast-forward not possible: {branch} has diverged from {remote_ref}",
                next_command=f"git pull --rebase {remote} {branch}",
            )
        tracker.complete("pull", "dry run" if pull.skipped else "")

        state = ctx.inspector.snapshot(remote, compare_branch=branch, local_ref=branch)
        result.state = state
    except GitextError as e:
        return result.fail(e)

    if state.is_up_to_date:
        message = f"{branch} is up to date with {remote_ref}"
    elif state.ahead_count is None:
        message = f"{branch} synced (no local ref to compare yet)"
    else:
        message = f"{branch} is ahead {state.ahead_count}, behind {state.behind_count} vs {remote_ref}"
    return result.succeed(message, next_command="continue working or run: gitext status")
