"""Workflow operations.

Each operation follows Validate → Fetch → Mutate → Report and returns a
:class:`WorkflowResult` instead of raising. Only a missing repository is
fatal, and that is detected by the policy loader before any workflow runs.
"""

from __future__ import annotations

from .base import WorkflowContext
from .cleanup import run_cleanup
from .prepare import run_prepare_pr
from .retarget import run_retarget
from .start import run_start
from .status import run_status
from .sync import run_sync
from .tracker import StepTracker
from .types import OutcomeStatus, WorkflowResult
from .update import CONTINUATION_COMMANDS, run_update

__all__ = [
    "WorkflowContext",
    "OutcomeStatus",
    "WorkflowResult",
    "StepTracker",
    "CONTINUATION_COMMANDS",
    "run_cleanup",
    "run_prepare_pr",
    "run_retarget",
    "run_start",
    "run_status",
    "run_sync",
    "run_update",
]
