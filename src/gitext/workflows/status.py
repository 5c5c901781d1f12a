"""Read-mostly status report with a suggested next step."""

from __future__ import annotations

import logging

from gitext.core.errors import GitextError
from gitext.core.executor import CommandExecutor
from gitext.core.policy import Policy

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_status"]


def run_status(policy: Policy, executor: CommandExecutor) -> WorkflowResult:
    tracker = StepTracker("Status")
    result = WorkflowResult("status", tracker)
    ctx = WorkflowContext(policy, executor)
    inspector = ctx.inspector
    remote = policy.remote_name

    try:
        if inspector.is_detached_head():
            result.state = inspector.snapshot(remote)
            result.warnings.append("HEAD is detached")
            return result.succeed(
                "HEAD is detached",
                next_command="checkout a branch: git checkout -b <branch-name>",
            )

        current = inspector.current_branch()
        clean = inspector.is_clean()
        result.items.append(f"Current branch: {current}")
        result.items.append("Working tree is clean" if clean else "Working tree has uncommitted changes")

        if inspector.remote_url(remote) is None:
            result.warnings.append(f"Remote '{remote}' not configured")
            result.state = inspector.snapshot(remote)
            return result.succeed(f"On {current}", next_command=f"git remote add {remote} <url>")

        tracker.add("fetch", f"Fetch {remote}")
        tracker.start("fetch")
        fetched = executor.execute(["fetch", remote])
        if fetched.error is not None:
            tracker.skip("fetch", "failed")
            result.warnings.append(f"Failed to fetch from {remote}: {fetched.error.message}")
        else:
            tracker.complete("fetch", "dry run" if fetched.skipped else "")

        next_command: str | None = None
        if not clean:
            next_command = "commit or stash changes: git commit -am 'message' or git stash"

        result.state = inspector.snapshot(remote, compare_branch=current)
        state = result.state
        if state.ahead_count:
            result.items.append(f"Ahead of {remote}/{current} by {state.ahead_count} commit(s)")
            if not state.behind_count:
                next_command = next_command or f"push changes: git push {remote} {current}"
        if state.behind_count:
            result.warnings.append(f"Behind {remote}/{current} by {state.behind_count} commit(s)")
            if current in policy.protected_branches:
                target = "stage" if current == policy.stage_branch else "production"
                next_command = next_command or f"sync with remote: gitext sync {target}"

        for label, branch in (("stage", policy.stage_branch), ("production", policy.production_branch)):
            if current == branch or not inspector.has_ref(policy.remote_ref(branch)):
                continue
            _, behind = inspector.ahead_behind(remote, branch)
            if behind:
                result.items.append(f"Behind {branch} by {behind} commit(s)")
                if label == "stage" and clean:
                    next_command = next_command or "update with stage: gitext update feature --with stage"

        if next_command is None and clean:
            if current in policy.protected_branches:
                target = "stage" if current == policy.stage_branch else "production"
                next_command = f"sync latest changes: gitext sync {target}"
            else:
                next_command = "prepare PR: gitext prepare pr --to stage"
    except GitextError as e:
        return result.fail(e)

    return result.succeed(f"On {current}", next_command=next_command)
