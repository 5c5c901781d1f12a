"""Move a feature branch from stage onto production with ``rebase --onto``.

This is the only workflow that rewrites published history, so its checks run
in a fixed order: feature pattern (unless overridden), remote, clean tree,
then the shared-branch heuristic. Nothing is fetched until all four pass.
"""

from __future__ import annotations

import logging

from gitext.core.errors import (
    ErrorKind,
    GitextError,
    InvalidTargetError,
    RecoverableConflictError,
    SharedBranchError,
)
from gitext.core.executor import CommandExecutor
from gitext.core.policy import Policy
from gitext.core.validation import is_shared_branch, require_attached_head, require_pattern

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_retarget"]


def run_retarget(
    policy: Policy,
    executor: CommandExecutor,
    *,
    onto: str = "production",
    source: str = "stage",
    override: bool = False,
    acknowledge_shared: bool = False,
) -> WorkflowResult:
    tracker = StepTracker("Retarget feature")
    result = WorkflowResult("retarget", tracker)
    ctx = WorkflowContext(policy, executor)
    remote = policy.remote_name

    try:
        if onto != "production":
            raise InvalidTargetError("--onto", onto, ["production"])
        if source != "stage":
            raise InvalidTargetError("--from", source, ["stage"])
        onto_branch = policy.production_branch
        from_branch = policy.stage_branch
        onto_ref = policy.remote_ref(onto_branch)
        from_ref = policy.remote_ref(from_branch)

        tracker.add("branch", "Current branch is a feature branch")
        tracker.add("remote", f"Remote {remote} reachable")
        tracker.add("clean", "Working tree clean")
        tracker.add("shared", "Branch is not shared")
        tracker.add("fetch", f"Fetch {remote}")
        tracker.add("rebase", f"Rebase onto {onto_ref} from {from_ref}")

        tracker.start("branch")
        require_attached_head(ctx.inspector.is_detached_head())
        current = ctx.inspector.current_branch()
        if override:
            tracker.skip("branch", "--override")
        else:
            require_pattern(
                current,
                policy.feature_pattern,
                hint="use --override to retarget a non-feature branch",
            )
            tracker.complete("branch", current)

        ctx.check_remote(tracker)
        ctx.check_clean(tracker)

        tracker.start("shared")
        remote_exists = ctx.inspector.remote_branch_exists(remote, current)
        authors: list[str] = []
        if remote_exists:
            authors = ctx.inspector.recent_authors(policy.shared_branch_window)
        if is_shared_branch(remote_exists, authors):
            if not acknowledge_shared:
                raise SharedBranchError(current, authors)
            logger.warning("Retargeting shared branch %s (acknowledged)", current)
            result.warnings.append(
                f"{current} appears shared ({len(authors)} recent authors); proceeding as acknowledged"
            )
            tracker.skip("shared", "acknowledged")
        else:
            tracker.complete("shared")

        ctx.fetch(tracker)
        ctx.check_branch(tracker, onto_branch)
        ctx.check_branch(tracker, from_branch)

        tracker.start("rebase")
        result.warnings.append("this rewrites history; a pushed branch will need a force push")
        rebase = executor.execute(["rebase", "--onto", onto_ref, from_ref])
        if rebase.error is not None:
            if rebase.error.kind is not ErrorKind.NON_ZERO_EXIT:
                logger.error("Retarget of %s did not complete: %s", current, rebase.error)
                return result.fail(rebase.error, next_command="inspect the repository: git status")
            logger.warning("Retarget of %s stopped on conflicts", current)
            return result.fail(RecoverableConflictError("rebase", "git rebase --continue", rebase.error))
        tracker.complete("rebase", "dry run" if rebase.skipped else "")

        result.state = ctx.inspector.snapshot(remote, compare_branch=onto_branch)
    except GitextError as e:
        return result.fail(e)

    if remote_exists:
        result.warnings.append(f"{remote}/{current} exists; a force push with lease is required")
        next_command = f"git push --force-with-lease {remote} {current}"
    else:
        next_command = f"git push {remote} {current}"
    return result.succeed(f"Retargeted {current} onto {onto_ref}", next_command=next_command)
