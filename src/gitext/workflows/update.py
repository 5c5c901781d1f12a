"""Bring a feature branch up to date with a protected branch."""

from __future__ import annotations

import logging

from gitext.core.constants import UPDATE_MODES
from gitext.core.errors import ErrorKind, GitextError, InvalidTargetError, RecoverableConflictError
from gitext.core.executor import CommandExecutor
from gitext.core.policy import Policy
from gitext.core.validation import require_attached_head, require_pattern

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_update", "CONTINUATION_COMMANDS"]

CONTINUATION_COMMANDS = {
    "rebase": "git rebase --continue",
    "merge": "git commit",
}


def run_update(
    policy: Policy,
    source: str,
    mode: str,
    executor: CommandExecutor,
) -> WorkflowResult:
    """Rebase or merge ``<remote>/<source>`` into the current feature branch.

    Conflicts are left in place for the operator and reported as recoverable,
    with the command that continues the interrupted operation.
    """
    tracker = StepTracker(f"Update feature ({mode})")
    result = WorkflowResult("update", tracker)
    ctx = WorkflowContext(policy, executor)
    remote = policy.remote_name

    try:
        if mode not in UPDATE_MODES:
            raise InvalidTargetError("--mode", mode, UPDATE_MODES)
        source_branch = policy.branch_for(source, option="--with")
        remote_ref = policy.remote_ref(source_branch)

        tracker.add("branch", "Current branch is a feature branch")
        tracker.add("remote", f"Remote {remote} reachable")
        tracker.add("clean", "Working tree clean")
        tracker.add("fetch", f"Fetch {remote}")
        tracker.add("refresh", f"Refresh local {source_branch}")
        tracker.add("apply", f"{mode.capitalize()} {remote_ref}")

        tracker.start("branch")
        require_attached_head(ctx.inspector.is_detached_head())
        current = ctx.inspector.current_branch()
        require_pattern(
            current,
            policy.feature_pattern,
            hint="switch to your feature branch first: git checkout <feature-branch>",
        )
        tracker.complete("branch", current)

        ctx.check_remote(tracker)
        ctx.check_clean(tracker)
        ctx.fetch(tracker)

        tracker.start("refresh")
        refresh = executor.execute(["fetch", remote, f"{source_branch}:{source_branch}"])
        if refresh.error is not None:
            logger.info("%s may not exist locally, using %s", source_branch, remote_ref)
            tracker.skip("refresh", f"using {remote_ref}")
        else:
            tracker.complete("refresh")

        tracker.start("apply")
        applied = executor.execute([mode, remote_ref])
        if applied.error is not None:
            if applied.error.kind is not ErrorKind.NON_ZERO_EXIT:
                logger.error("%s onto %s did not complete: %s", mode, remote_ref, applied.error)
                return result.fail(applied.error, next_command="inspect the repository: git status")
            continuation = CONTINUATION_COMMANDS[mode]
            logger.warning("%s of %s onto %s stopped on conflicts", mode, current, remote_ref)
            return result.fail(RecoverableConflictError(mode, continuation, applied.error))
        tracker.complete("apply", "dry run" if applied.skipped else "")

        result.state = ctx.inspector.snapshot(remote, compare_branch=source_branch)
    except GitextError as e:
        return result.fail(e)

    verb = "Rebased onto" if mode == "rebase" else "Merged"
    return result.succeed(
        f"{verb} {remote_ref}",
        next_command=f"push changes: git push {remote} {current}",
    )
