"""Shared validate/fetch helpers for workflow operations."""

from __future__ import annotations

import logging

from gitext.core.executor import CommandExecutor
from gitext.core.inspector import RepositoryInspector
from gitext.core.policy import Policy
from gitext.core.validation import require_branch, require_clean, require_remote

from .tracker import StepTracker

logger = logging.getLogger(__name__)

__all__ = ["WorkflowContext"]


class WorkflowContext:
    """Policy plus executor for one invocation.

    Repository state is never cached here; each check queries git again.
    """

    def __init__(self, policy: Policy, executor: CommandExecutor) -> None:
        self.policy = policy
        self.executor = executor
        self.inspector = RepositoryInspector(executor)

    @property
    def remote(self) -> str:
        return self.policy.remote_name

    @property
    def dry_run(self) -> bool:
        return self.executor.dry_run

    def check_remote(self, tracker: StepTracker) -> None:
        tracker.start("remote")
        require_remote(self.remote, self.inspector.remote_url(self.remote))
        tracker.complete("remote", self.remote)

    def check_branch(self, tracker: StepTracker, branch: str, key: str | None = None) -> None:
        key = key or f"branch:{branch}"
        tracker.add(key, f"Branch {branch} exists")
        tracker.start(key)
        local = self.inspector.branch_exists(branch)
        on_remote = local or self.inspector.remote_branch_exists(self.remote, branch)
        require_branch(branch, self.remote, local_exists=local, remote_exists=on_remote)
        tracker.complete(key, "local" if local else f"on {self.remote}")

    def check_clean(self, tracker: StepTracker) -> None:
        tracker.start("clean")
        require_clean(self.inspector.is_clean())
        tracker.complete("clean")

    def fetch(self, tracker: StepTracker, key: str = "fetch") -> None:
        """Fetch the policy remote; failures propagate (never retried)."""
        tracker.start(key)
        result = self.executor.execute(["fetch", self.remote])
        result.check()
        tracker.complete(key, "dry run" if result.skipped else self.remote)
        logger.info("Fetched %s", self.remote)
