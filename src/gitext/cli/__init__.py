"""CLI helpers for gitext."""

from .ui import StepTracker, render_result

__all__ = ["StepTracker", "render_result"]
