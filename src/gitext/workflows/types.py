"""Result types shared by all workflow operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gitext.core.errors import (
    ExecutionError,
    GitextError,
    PreconditionError,
    RecoverableConflictError,
)
from gitext.core.inspector import RepositoryState

from .tracker import StepTracker

__all__ = ["OutcomeStatus", "WorkflowResult", "classify"]


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    PRECONDITION_FAILED = "precondition_failed"
    EXECUTION_FAILED = "execution_failed"
    RECOVERABLE = "recoverable"


def classify(error: GitextError) -> OutcomeStatus:
    """Map an engine error onto the outcome taxonomy."""
    if isinstance(error, RecoverableConflictError):
        return OutcomeStatus.RECOVERABLE
    if isinstance(error, PreconditionError):
        return OutcomeStatus.PRECONDITION_FAILED
    if isinstance(error, ExecutionError):
        return OutcomeStatus.EXECUTION_FAILED
    return OutcomeStatus.EXECUTION_FAILED


@dataclass
class WorkflowResult:
    """Outcome of one workflow operation.

    ``next_command`` is the exact command the operator should run next,
    whether the operation succeeded or not.
    """

    operation: str
    tracker: StepTracker
    status: OutcomeStatus = OutcomeStatus.SUCCESS
    message: str = ""
    next_command: str | None = None
    state: RepositoryState | None = None
    warnings: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    body: str | None = None
    error: GitextError | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def recoverable(self) -> bool:
        return self.status is OutcomeStatus.RECOVERABLE

    def fail(
        self,
        error: GitextError,
        *,
        next_command: str | None = None,
        message: str | None = None,
    ) -> "WorkflowResult":
        """Record ``error`` as the outcome and return self."""
        self.status = classify(error)
        self.error = error
        self.message = message or error.message
        for step in self.tracker.steps:
            if step["status"] == "running":
                self.tracker.error(step["key"], error.message)
        if isinstance(error, RecoverableConflictError):
            self.next_command = next_command or error.continuation
        else:
            self.next_command = next_command or error.suggestion
        return self

    def succeed(self, message: str, *, next_command: str | None = None) -> "WorkflowResult":
        self.status = OutcomeStatus.SUCCESS
        self.message = message
        self.next_command = next_command
        return self
