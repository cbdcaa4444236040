"""
Error types raised by the progress pipeline.

Absent plan trees and malformed task lists are not errors (callers print
guidance or fall back to defaults). What remains is state on disk that
cannot be read or written.
"""

from pathlib import Path
from typing import Optional


class PlanProgressError(Exception):
    """Base class for all doplan progress errors."""


class StateFileError(PlanProgressError):
    """A persisted JSON record exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


class StateWriteError(PlanProgressError):
    """Writing a progress record or dashboard file failed."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to write {path}{detail}")


class DashboardNotFoundError(PlanProgressError):
    """The dashboard snapshot has not been generated yet."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Dashboard not found at {path}. Run 'doplan progress' first.")
