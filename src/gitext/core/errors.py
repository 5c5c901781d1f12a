"""Exception hierarchy for the workflow safety engine.

Every error carries a human-readable ``message`` and an optional corrective
``suggestion`` (usually a command the operator can run next).
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class GitextError(Exception):
    """Base exception for gitext errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} → {self.suggestion}"
        return self.message


class NotARepositoryError(GitextError):
    """Raised when no git repository can be located."""

    def __init__(self, detail: str | None = None):
        message = "not in a git repository"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, "run this command from within a git repository")


class ConfigError(GitextError):
    """Raised when the .gitext configuration cannot be parsed or validated."""

    def __init__(self, message: str):
        super().__init__(f"invalid configuration: {message}", "fix .gitext at the repository root")


# =============================================================================
# Precondition failures (raised before any mutation)
# =============================================================================


class PreconditionError(GitextError):
    """A safety check failed; nothing was mutated."""


class DirtyWorkingTreeError(PreconditionError):
    def __init__(self) -> None:
        super().__init__(
            "working tree has uncommitted changes",
            "commit or stash changes first: git stash",
        )


class RemoteNotFoundError(PreconditionError):
    def __init__(self, remote: str, *, has_url: bool = False):
        self.remote = remote
        if has_url:
            super().__init__(
                f"remote '{remote}' has no URL configured",
                f"git remote set-url {remote} <url>",
            )
        else:
            super().__init__(
                f"remote '{remote}' does not exist",
                f"git remote add {remote} <url>",
            )


class BranchNotFoundError(PreconditionError):
    def __init__(self, branch: str, remote: str):
        self.branch = branch
        self.remote = remote
        super().__init__(
            f"branch '{branch}' does not exist locally or on '{remote}'",
            f"git fetch {remote} && git branch -a",
        )


class BranchExistsError(PreconditionError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"branch '{branch}' already exists",
            f"switch to it instead: git checkout {branch}",
        )


class PatternMismatchError(PreconditionError):
    def __init__(self, branch: str, pattern: str, *, role: str = "feature", hint: str | None = None):
        self.branch = branch
        self.pattern = pattern
        super().__init__(
            f"branch '{branch}' does not match {role} pattern '{pattern}'",
            hint or f"use a branch named like '{pattern}'",
        )


class SharedBranchError(PreconditionError):
    def __init__(self, branch: str, authors: Sequence[str]):
        self.branch = branch
        self.authors = tuple(authors)
        super().__init__(
            f"branch '{branch}' appears to be shared "
            f"({len(self.authors)} authors in recent commits); retargeting rewrites history",
            "coordinate with collaborators, then re-run with --i-know-what-im-doing",
        )


class DetachedHeadError(PreconditionError):
    def __init__(self) -> None:
        super().__init__(
            "HEAD is detached",
            "checkout a branch: git checkout -b <branch-name>",
        )


class InvalidTargetError(PreconditionError):
    def __init__(self, option: str, value: str, allowed: Sequence[str]):
        self.option = option
        self.value = value
        choices = " or ".join(f"'{choice}'" for choice in allowed)
        super().__init__(f"{option} must be {choices} (got '{value}')")


# =============================================================================
# Execution failures
# =============================================================================


class ErrorKind(str, Enum):
    """Why an external command failed."""

    NON_ZERO_EXIT = "non_zero_exit"
    TIMEOUT = "timeout"
    UNEXPECTED_OUTPUT = "unexpected_output"
    TOOL_MISSING = "tool_missing"


class ExecutionError(GitextError):
    """An external command failed; ``output`` keeps combined stdout/stderr."""

    def __init__(
        self,
        kind: ErrorKind,
        args: Sequence[str],
        output: str = "",
        *,
        returncode: int | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.command_args = tuple(args)
        self.output = output
        self.returncode = returncode
        super().__init__(self._describe(), suggestion)

    @property
    def command_line(self) -> str:
        return " ".join(self.command_args)

    def _describe(self) -> str:
        if self.kind is ErrorKind.TIMEOUT:
            return f"{self.command_line} timed out"
        if self.kind is ErrorKind.TOOL_MISSING:
            return f"{self.command_line}: executable not found on PATH"
        if self.kind is ErrorKind.UNEXPECTED_OUTPUT:
            return f"unexpected output from {self.command_line}: {self.output!r}"
        return f"{self.command_line} exited with status {self.returncode}"


class RecoverableConflictError(GitextError):
    """A rebase or merge stopped on conflicts and needs manual resolution."""

    def __init__(self, mode: str, continuation: str, cause: ExecutionError):
        self.mode = mode
        self.continuation = continuation
        self.cause = cause
        super().__init__(
            f"{mode} encountered conflicts",
            f"resolve conflicts, then run: {continuation}",
        )


__all__ = [
    "GitextError",
    "NotARepositoryError",
    "ConfigError",
    "PreconditionError",
    "DirtyWorkingTreeError",
    "RemoteNotFoundError",
    "BranchNotFoundError",
    "BranchExistsError",
    "PatternMismatchError",
    "SharedBranchError",
    "DetachedHeadError",
    "InvalidTargetError",
    "ErrorKind",
    "ExecutionError",
    "RecoverableConflictError",
]
