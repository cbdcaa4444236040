"""
Progress roll-up models.

All records are transient: the pipeline rebuilds them from the plan tree on
every invocation. The only persistent identity is the directory each record
was derived from (feature_dir / phase_dir), which is also where the writer
puts the corresponding JSON record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from doplan.models.task import TaskStatus

DEFAULT_PRIORITY = "medium"


@dataclass(frozen=True)
class TaskStats:
    """Counts of a feature's tasks by status. total is the sum of the rest."""

    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    blocked: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.in_progress + self.not_started + self.blocked

    def __add__(self, other: "TaskStats") -> "TaskStats":
        return TaskStats(
            completed=self.completed + other.completed,
            in_progress=self.in_progress + other.in_progress,
            not_started=self.not_started + other.not_started,
            blocked=self.blocked + other.blocked,
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "in_progress": self.in_progress,
            "not_started": self.not_started,
            "blocked": self.blocked,
        }


@dataclass
class FeatureProgress:
    feature_name: str
    phase_name: str
    priority: str
    progress: float
    status: TaskStatus
    tasks: TaskStats
    feature_dir: Optional[Path] = None


@dataclass
class PhaseProgress:
    phase_name: str
    progress: float
    status: TaskStatus
    features: List[FeatureProgress] = field(default_factory=list)
    phase_dir: Optional[Path] = None

    def feature_counts(self) -> TaskStats:
        """Features of this phase counted by status, in TaskStats shape."""
        by_status = {s: 0 for s in TaskStatus}
        for feature in self.features:
            by_status[feature.status] += 1
        return TaskStats(
            completed=by_status[TaskStatus.COMPLETED],
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            not_started=by_status[TaskStatus.NOT_STARTED],
            blocked=by_status[TaskStatus.BLOCKED],
        )


@dataclass
class ProjectDashboard:
    project_name: str
    overall_progress: float
    phases: List[PhaseProgress] = field(default_factory=list)
    updated_at: Optional[str] = None

    def all_features(self) -> List[FeatureProgress]:
        return [f for phase in self.phases for f in phase.features]

    def task_totals(self) -> TaskStats:
        """Aggregate task counts across every feature in the project."""
        totals = TaskStats()
        for feature in self.all_features():
            totals = totals + feature.tasks
        return totals
