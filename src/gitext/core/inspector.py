"""Read-only repository queries.

Each query issues one or more read-only git commands through the executor and
parses their fixed-format output. Queries run even in dry-run mode so that
every workflow reports real clean/ahead/behind values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import ErrorKind, ExecutionError
from .executor import CommandExecutor

logger = logging.getLogger(__name__)

__all__ = ["RepositoryState", "RepositoryInspector", "dedupe"]


@dataclass(frozen=True)
class RepositoryState:
    """Snapshot of the live repository, recomputed for every operation."""

    current_branch: str
    is_clean: bool
    is_detached_head: bool
    ahead_count: int | None = None
    behind_count: int | None = None
    compared_ref: str | None = None
    recent_authors: tuple[str, ...] = ()
    merged_branches: tuple[str, ...] = ()

    @property
    def is_up_to_date(self) -> bool:
        return self.ahead_count == 0 and self.behind_count == 0


def dedupe(values: Iterable[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        value = value.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


class RepositoryInspector:
    """Pure-read queries over a git working tree."""

    def __init__(self, executor: CommandExecutor) -> None:
        self.executor = executor

    def _read(self, *args: str) -> str:
        return self.executor.query(*args).check()

    def is_repository(self) -> bool:
        return self.executor.query("rev-parse", "--git-dir").ok

    def repo_root(self) -> Path:
        return Path(self._read("rev-parse", "--show-toplevel"))

    def current_branch(self) -> str:
        """Current branch name; ``HEAD`` when detached."""
        branch = self._read("rev-parse", "--abbrev-ref", "HEAD").strip()
        if not branch:
            raise ExecutionError(
                ErrorKind.UNEXPECTED_OUTPUT, ["git", "rev-parse", "--abbrev-ref", "HEAD"], branch
            )
        return branch

    def is_clean(self) -> bool:
        return self._read("status", "--porcelain").strip() == ""

    def is_detached_head(self) -> bool:
        # A failing symbolic-ref query is a positive detached signal, not an error.
        result = self.executor.query("symbolic-ref", "-q", "HEAD")
        if not result.ok:
            return True
        return result.stdout.strip() == ""

    def remote_url(self, remote: str) -> str | None:
        """URL configured for ``remote``, or None when the remote is missing."""
        result = self.executor.query("remote", "get-url", remote)
        if not result.ok:
            return None
        return result.stdout.strip()

    def branch_exists(self, branch: str) -> bool:
        return self._read("branch", "--list", branch).strip() != ""

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        return self._read("ls-remote", "--heads", remote, branch).strip() != ""

    def has_ref(self, ref: str) -> bool:
        return self.executor.query("rev-parse", "--verify", "--quiet", ref).ok

    def ahead_behind(self, remote: str, branch: str, local_ref: str | None = None) -> tuple[int, int]:
        """Return ``(ahead, behind)`` of ``local_ref`` against ``remote/branch``."""
        spec = f"{remote}/{branch}...{local_ref or 'HEAD'}"
        args = ["rev-list", "--left-right", "--count", spec]
        output = self._read(*args)
        parts = output.split()
        if len(parts) != 2:
            raise ExecutionError(ErrorKind.UNEXPECTED_OUTPUT, ["git", *args], output)
        try:
            behind, ahead = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise ExecutionError(ErrorKind.UNEXPECTED_OUTPUT, ["git", *args], output) from exc
        return ahead, behind

    def recent_authors(self, count: int, ref: str = "HEAD") -> list[str]:
        """Distinct author names over the last ``count`` commits of ``ref``."""
        output = self._read("log", "-n", str(count), "--format=%an", ref)
        return dedupe(output.splitlines())

    def merged_branches(self, into: str) -> list[str]:
        """Local branches already merged into ``into`` (excluding ``into``)."""
        output = self._read("branch", "--merged", into, "--format", "%(refname:short)")
        branches = []
        for line in output.splitlines():
            line = line.strip()
            if not line or line == into or line.startswith(("*", "(")):
                continue
            branches.append(line)
        return dedupe(branches)

    def has_staged_changes(self) -> bool:
        # --quiet exits 1 when there is a staged diff
        return not self.executor.query("diff", "--cached", "--quiet").ok

    def commit_summary(self, base_ref: str, head_ref: str) -> list[str]:
        output = self._read("log", "--oneline", f"{base_ref}..{head_ref}")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def snapshot(
        self,
        remote: str,
        *,
        compare_branch: str | None = None,
        local_ref: str | None = None,
        author_window: int = 0,
    ) -> RepositoryState:
        """Build a :class:`RepositoryState` from live queries.

        Ahead/behind counts are only computed when ``remote/compare_branch``
        is known locally; otherwise they stay None.
        """
        detached = self.is_detached_head()
        current = self.current_branch()
        clean = self.is_clean()

        ahead = behind = None
        compared = None
        if compare_branch:
            compared = f"{remote}/{compare_branch}"
            local_known = local_ref is None or self.has_ref(local_ref)
            if self.has_ref(compared) and local_known:
                ahead, behind = self.ahead_behind(remote, compare_branch, local_ref)
            else:
                logger.debug("Missing %s or %s; skipping ahead/behind", compared, local_ref)

        authors: tuple[str, ...] = ()
        if author_window > 0 and not detached:
            authors = tuple(self.recent_authors(author_window))

        return RepositoryState(
            current_branch=current,
            is_clean=clean,
            is_detached_head=detached,
            ahead_count=ahead,
            behind_count=behind,
            compared_ref=compared,
            recent_authors=authors,
        )
