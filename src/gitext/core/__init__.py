"""Workflow safety engine core: executor, inspector, policy and validation."""

from .errors import (
    BranchExistsError,
    BranchNotFoundError,
    ConfigError,
    DetachedHeadError,
    DirtyWorkingTreeError,
    ErrorKind,
    ExecutionError,
    GitextError,
    InvalidTargetError,
    NotARepositoryError,
    PatternMismatchError,
    PreconditionError,
    RecoverableConflictError,
    RemoteNotFoundError,
    SharedBranchError,
)
from .executor import CommandExecutor, CommandResult, ExecutorOptions
from .inspector import RepositoryInspector, RepositoryState
from .policy import Policy, find_repo_root, load_policy, policy_from_mapping
from .validation import (
    derive_feature_branch,
    is_shared_branch,
    matches_pattern,
    require_attached_head,
    require_branch,
    require_clean,
    require_pattern,
    require_remote,
)

__all__ = [
    "BranchExistsError",
    "BranchNotFoundError",
    "ConfigError",
    "DetachedHeadError",
    "DirtyWorkingTreeError",
    "ErrorKind",
    "ExecutionError",
    "GitextError",
    "InvalidTargetError",
    "NotARepositoryError",
    "PatternMismatchError",
    "PreconditionError",
    "RecoverableConflictError",
    "RemoteNotFoundError",
    "SharedBranchError",
    "CommandExecutor",
    "CommandResult",
    "ExecutorOptions",
    "RepositoryInspector",
    "RepositoryState",
    "Policy",
    "find_repo_root",
    "load_policy",
    "policy_from_mapping",
    "derive_feature_branch",
    "is_shared_branch",
    "matches_pattern",
    "require_attached_head",
    "require_branch",
    "require_clean",
    "require_pattern",
    "require_remote",
]
