"""Resolved branch policy and its loader.

The policy is read from ``.gitext`` (YAML) at the repository root:

    branch:
      production: production
      stage: stage
    naming:
      feature: feature/*
      hotfix: hotfix/*
    merge:
      requireRetargetForProdFromStage: true
    ci:
      stage: ["make test"]
      production: ["make test", "make lint"]
    pr:
      templatePath: .github/pull_request_template.md
    remote:
      name: origin
    safety:
      sharedBranchWindow: 10

Missing keys fall back to defaults. The file itself is optional.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_FEATURE_PATTERN,
    DEFAULT_HOTFIX_PATTERN,
    DEFAULT_PRODUCTION_BRANCH,
    DEFAULT_REMOTE_NAME,
    DEFAULT_SHARED_BRANCH_WINDOW,
    DEFAULT_STAGE_BRANCH,
    TARGETS,
)
from .errors import ConfigError, InvalidTargetError, NotARepositoryError

logger = logging.getLogger(__name__)

__all__ = ["Policy", "find_repo_root", "load_policy", "policy_from_mapping"]


@dataclass(frozen=True)
class Policy:
    """Immutable policy for one invocation."""

    production_branch: str = DEFAULT_PRODUCTION_BRANCH
    stage_branch: str = DEFAULT_STAGE_BRANCH
    feature_pattern: str = DEFAULT_FEATURE_PATTERN
    hotfix_pattern: str = DEFAULT_HOTFIX_PATTERN
    remote_name: str = DEFAULT_REMOTE_NAME
    ci_commands: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({target: () for target in TARGETS})
    )
    pr_template_path: str | None = None
    shared_branch_window: int = DEFAULT_SHARED_BRANCH_WINDOW
    require_retarget_for_prod_from_stage: bool = False
    repo_root: Path | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.production_branch:
            raise ConfigError("branch.production cannot be empty")
        if not self.stage_branch:
            raise ConfigError("branch.stage cannot be empty")
        if self.production_branch == self.stage_branch:
            raise ConfigError("branch.production and branch.stage must be different")
        if not self.remote_name:
            raise ConfigError("remote.name cannot be empty")
        if self.shared_branch_window < 1:
            raise ConfigError("safety.sharedBranchWindow must be a positive integer")

    @property
    def protected_branches(self) -> tuple[str, str]:
        return (self.production_branch, self.stage_branch)

    def branch_for(self, target: str, option: str = "target") -> str:
        """Map ``stage``/``production`` to the configured branch name."""
        if target == "stage":
            return self.stage_branch
        if target == "production":
            return self.production_branch
        raise InvalidTargetError(option, target, TARGETS)

    def ci_for(self, target: str) -> tuple[str, ...]:
        return tuple(self.ci_commands.get(target, ()))

    def remote_ref(self, branch: str) -> str:
        return f"{self.remote_name}/{branch}"


def find_repo_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` (default: cwd) to the directory holding ``.git``.

    ``.git`` may be a directory (primary checkout) or a file (worktree).
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    raise NotARepositoryError(f"no .git found above {current}")


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _text(section: Mapping[str, Any], key: str, default: str, name: str) -> str:
    value = section.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string")
    return value.strip() or default


def _command_list(section: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = section.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"ci.{key} must be a list of command strings")
    commands = tuple(item for item in value if item.strip())
    for command in commands:
        try:
            shlex.split(command)
        except ValueError as e:
            raise ConfigError(f"ci.{key} entry {command!r} is not a valid command: {e}") from e
    return commands


def policy_from_mapping(data: Mapping[str, Any] | None, repo_root: Path | None = None) -> Policy:
    """Build a validated Policy from parsed YAML, applying defaults."""
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigError("top level must be a mapping")

    branch = _section(data, "branch")
    naming = _section(data, "naming")
    merge = _section(data, "merge")
    ci = _section(data, "ci")
    pr = _section(data, "pr")
    remote = _section(data, "remote")
    safety = _section(data, "safety")

    window = safety.get("sharedBranchWindow", DEFAULT_SHARED_BRANCH_WINDOW)
    if isinstance(window, bool) or not isinstance(window, int):
        raise ConfigError("safety.sharedBranchWindow must be a positive integer")

    retarget_flag = merge.get("requireRetargetForProdFromStage", False)
    if not isinstance(retarget_flag, bool):
        raise ConfigError("merge.requireRetargetForProdFromStage must be true or false")

    template = pr.get("templatePath")
    if template is not None and not isinstance(template, str):
        raise ConfigError("pr.templatePath must be a string")

    return Policy(
        production_branch=_text(branch, "production", DEFAULT_PRODUCTION_BRANCH, "branch.production"),
        stage_branch=_text(branch, "stage", DEFAULT_STAGE_BRANCH, "branch.stage"),
        feature_pattern=_text(naming, "feature", DEFAULT_FEATURE_PATTERN, "naming.feature"),
        hotfix_pattern=_text(naming, "hotfix", DEFAULT_HOTFIX_PATTERN, "naming.hotfix"),
        remote_name=_text(remote, "name", DEFAULT_REMOTE_NAME, "remote.name"),
        ci_commands=MappingProxyType({target: _command_list(ci, target) for target in TARGETS}),
        pr_template_path=template or None,
        shared_branch_window=window,
        require_retarget_for_prod_from_stage=retarget_flag,
        repo_root=repo_root,
    )


def load_policy(start: Path | None = None) -> Policy:
    """Locate the repository and load its ``.gitext`` policy.

    Raises:
        NotARepositoryError: No enclosing git repository
        ConfigError: The file exists but is unreadable or invalid
    """
    repo_root = find_repo_root(start)
    config_file = repo_root / CONFIG_FILENAME

    if not config_file.exists():
        logger.debug("No %s at %s; using defaults", CONFIG_FILENAME, repo_root)
        return policy_from_mapping({}, repo_root)

    yaml = YAML(typ="safe")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as e:
        logger.error(f"Failed to load {config_file}: {e}")
        raise ConfigError(f"cannot parse {config_file}: {e}") from e

    return policy_from_mapping(data, repo_root)
