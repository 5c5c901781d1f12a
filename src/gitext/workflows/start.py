"""Create a feature branch from a protected branch."""

from __future__ import annotations

import logging

from gitext.core.errors import BranchExistsError, GitextError
from gitext.core.executor import CommandExecutor
from gitext.core.policy import Policy
from gitext.core.validation import derive_feature_branch, require_pattern

from .base import WorkflowContext
from .tracker import StepTracker
from .types import WorkflowResult

logger = logging.getLogger(__name__)

__all__ = ["run_start"]


def run_start(
    policy: Policy,
    ticket: str,
    slug: str,
    source: str,
    executor: CommandExecutor,
) -> WorkflowResult:
    """Create ``feature/<ticket>-<slug>`` from ``source`` and check it out.

    The derived name is validated against the feature pattern before anything
    is fetched or checked out. Refreshing the source branch is best effort;
    the new branch is created from whatever local ref exists.
    """
    tracker = StepTracker("Start feature")
    result = WorkflowResult("start", tracker)
    ctx = WorkflowContext(policy, executor)
    remote = policy.remote_name

    try:
        source_branch = policy.branch_for(source, option="--from")
        branch_name = derive_feature_branch(ticket, slug)

        tracker.add("name", f"Branch name {branch_name}")
        tracker.add("remote", f"Remote {remote} reachable")
        tracker.add("clean", "Working tree clean")
        tracker.add("absent", f"{branch_name} does not exist yet")
        tracker.add("fetch", f"Fetch {remote}")
        tracker.add("checkout", f"Checkout {source_branch}")
        tracker.add("pull", f"Fast-forward {source_branch}")
        tracker.add("create", f"Create {branch_name}")

        tracker.start("name")
        require_pattern(
            branch_name,
            policy.feature_pattern,
            hint=f"adjust naming.feature in .gitext or choose a ticket/slug matching '{policy.feature_pattern}'",
        )
        tracker.complete("name", policy.feature_pattern)

        ctx.check_remote(tracker)
        ctx.check_branch(tracker, source_branch)
        ctx.check_clean(tracker)

        tracker.start("absent")
        if ctx.inspector.branch_exists(branch_name):
            raise BranchExistsError(branch_name)
        tracker.complete("absent")

        ctx.fetch(tracker)

        tracker.start("checkout")
        executor.run("checkout", source_branch)
        tracker.complete("checkout")

        tracker.start("pull")
        pull = executor.execute(["pull", "--ff-only", remote, source_branch])
        if pull.error is not None:
            logger.warning("Fast-forward pull of %s failed; continuing", source_branch)
            tracker.skip("pull", "fast-forward failed")
            result.warnings.append(
                f"fast-forward pull of {source_branch} failed, branching from the local ref"
            )
        else:
            tracker.complete("pull")

        tracker.start("create")
        executor.run("checkout", "-b", branch_name)
        tracker.complete("create")

        result.state = ctx.inspector.snapshot(remote)
    except GitextError as e:
        return result.fail(e)

    return result.succeed(
        f"Created and checked out {branch_name} from {source_branch}",
        next_command="start making changes, then run: gitext prepare pr --to stage",
    )
