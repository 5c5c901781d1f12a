"""Shared defaults for gitext policy and execution."""

from __future__ import annotations

CONFIG_FILENAME = ".gitext"

DEFAULT_PRODUCTION_BRANCH = "production"
DEFAULT_STAGE_BRANCH = "stage"
DEFAULT_REMOTE_NAME = "origin"
DEFAULT_FEATURE_PATTERN = "feature/*"
DEFAULT_HOTFIX_PATTERN = "hotfix/*"

# Number of recent commits sampled by the shared-branch heuristic.
DEFAULT_SHARED_BRANCH_WINDOW = 10

GIT_TIMEOUT_SECONDS = 30.0
CI_TIMEOUT_SECONDS = 600.0

TARGETS = ("stage", "production")
UPDATE_MODES = ("rebase", "merge")

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_PRODUCTION_BRANCH",
    "DEFAULT_STAGE_BRANCH",
    "DEFAULT_REMOTE_NAME",
    "DEFAULT_FEATURE_PATTERN",
    "DEFAULT_HOTFIX_PATTERN",
    "DEFAULT_SHARED_BRANCH_WINDOW",
    "GIT_TIMEOUT_SECONDS",
    "CI_TIMEOUT_SECONDS",
    "TARGETS",
    "UPDATE_MODES",
]
