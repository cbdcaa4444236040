"""
Task data models.

A TaskRecord is one "#### Task" block parsed from a feature's tasks.md. The
parser owns it for one parse; the calculator and recommendation engine
consume it immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from doplan.config import TASKS_FILE_NAME

DEFAULT_EFFORT = "Unknown"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"

    @property
    def label(self) -> str:
        """Human-readable label as written in tasks.md checkboxes."""
        return _STATUS_LABELS[self]

    @property
    def rank(self) -> int:
        """Recommendation rank: lower is worked on first."""
        return STATUS_RANK.get(self, len(STATUS_RANK))


_STATUS_LABELS = {
    TaskStatus.NOT_STARTED: "Not Started",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.BLOCKED: "Blocked",
}

# Open work ordering for recommendations. Completed tasks never reach the
# engine and fall into the catch-all rank.
STATUS_RANK = {
    TaskStatus.IN_PROGRESS: 0,
    TaskStatus.NOT_STARTED: 1,
    TaskStatus.BLOCKED: 2,
}


@dataclass
class TaskRecord:
    """A single task block from a tasks.md file."""

    name: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    estimated_effort: str = DEFAULT_EFFORT

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


@dataclass
class OpenTask:
    """
    An uncompleted task together with the feature context it was found in.

    Built by the pipeline for the recommendation engine.
    """

    task: TaskRecord
    phase_name: str
    feature_name: str
    priority: str
    feature_progress: float
    feature_dir: Path

    @property
    def name(self) -> str:
        return self.task.name

    @property
    def status(self) -> TaskStatus:
        return self.task.status

    @property
    def tasks_file(self) -> Path:
        return self.feature_dir / TASKS_FILE_NAME
