"""Stateless safety checks.

Predicates return booleans; ``require_*`` helpers raise a
:class:`~gitext.core.errors.PreconditionError` carrying a corrective
suggestion. None of these touch the repository.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from .errors import (
    BranchNotFoundError,
    DetachedHeadError,
    DirtyWorkingTreeError,
    PatternMismatchError,
    PreconditionError,
    RemoteNotFoundError,
)

__all__ = [
    "compile_pattern",
    "matches_pattern",
    "is_shared_branch",
    "derive_feature_branch",
    "require_clean",
    "require_remote",
    "require_branch",
    "require_pattern",
    "require_attached_head",
]


@lru_cache(maxsize=32)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a glob-style branch pattern into an anchored regex.

    ``*`` becomes a greedy ``.*``; every other character is literal.
    """
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(f"^{body}$")


def matches_pattern(branch_name: str, pattern: str) -> bool:
    """Case-sensitive, whole-name match of ``branch_name`` against ``pattern``."""
    return compile_pattern(pattern).fullmatch(branch_name) is not None


def is_shared_branch(remote_exists: bool, recent_authors: Iterable[str]) -> bool:
    """True iff the branch is on the remote and has more than one recent author.

    Heuristic only: co-authors older than the sampled window are not seen.
    """
    if not remote_exists:
        return False
    return len(set(recent_authors)) > 1


def derive_feature_branch(ticket: str, slug: str) -> str:
    """Build ``feature/<ticket>-<slug>``."""
    ticket = ticket.strip()
    slug = slug.strip()
    if not ticket:
        raise PreconditionError("--ticket is required", "pass a ticket id, e.g. --ticket KWS-123")
    if not slug:
        raise PreconditionError("--slug is required", "pass a short slug, e.g. --slug retry-policy")
    return f"feature/{ticket}-{slug}"


def require_clean(is_clean: bool) -> None:
    if not is_clean:
        raise DirtyWorkingTreeError()


def require_remote(remote: str, url: str | None) -> None:
    """``url`` is None when the remote does not exist, empty when it has no URL."""
    if url is None:
        raise RemoteNotFoundError(remote)
    if not url.strip():
        raise RemoteNotFoundError(remote, has_url=True)


def require_branch(branch: str, remote: str, *, local_exists: bool, remote_exists: bool) -> None:
    if not (local_exists or remote_exists):
        raise BranchNotFoundError(branch, remote)


def require_pattern(branch_name: str, pattern: str, *, role: str = "feature", hint: str | None = None) -> None:
    if not matches_pattern(branch_name, pattern):
        raise PatternMismatchError(branch_name, pattern, role=role, hint=hint)


def require_attached_head(is_detached: bool) -> None:
    if is_detached:
        raise DetachedHeadError()
