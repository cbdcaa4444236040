"""
Next-task recommendation.

Given every uncompleted task in the plan, pick one: highest priority first,
then in-progress work before new work before blocked work. The sort is
stable, so ties keep discovery order (phase dir, feature dir, document).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from doplan.models.task import OpenTask, TaskStatus
from doplan.utils.dates import sum_durations

PRIORITY_RANK = {
    "high": 0,
    "medium": 1,
    "low": 2,
}

_ACTION_TEMPLATES = {
    TaskStatus.IN_PROGRESS: "Continue working on: {}",
    TaskStatus.NOT_STARTED: "Start: {}",
    TaskStatus.BLOCKED: "Unblock: {}",
}


def priority_rank(priority: str) -> int:
    return PRIORITY_RANK.get((priority or "").strip().lower(), len(PRIORITY_RANK))


def sort_key(task: OpenTask):
    return (priority_rank(task.priority), task.status.rank)


@dataclass
class Recommendation:
    action: str
    priority: str
    phase_name: str
    feature_name: str
    task_name: str
    status: TaskStatus
    estimated_effort: str
    reason: str
    feature_path: Path
    tasks_file: Path

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "priority": self.priority,
            "phase": self.phase_name,
            "feature": self.feature_name,
            "task": self.task_name,
            "status": self.status.value,
            "estimated_effort": self.estimated_effort,
            "reason": self.reason,
            "feature_path": str(self.feature_path),
            "tasks_file": str(self.tasks_file),
        }


@dataclass
class OpenWorkSummary:
    total_incomplete: int = 0
    high_priority: int = 0
    in_progress: int = 0
    not_started: int = 0
    blocked: int = 0
    estimated_minutes: int = 0

    def to_dict(self) -> dict:
        return {
            "total_incomplete": self.total_incomplete,
            "high_priority": self.high_priority,
            "in_progress": self.in_progress,
            "not_started": self.not_started,
            "blocked": self.blocked,
            "estimated_minutes": self.estimated_minutes,
        }


def action_phrase(task: OpenTask) -> str:
    return _ACTION_TEMPLATES.get(task.status, "Work on: {}").format(task.name)


def recommend(open_tasks: Sequence[OpenTask]) -> Optional[Recommendation]:
    """
    Select the next task to work on.

    Returns:
        The recommendation, or None when there is no open work left (every
        task is complete).
    """
    if not open_tasks:
        return None

    chosen = sorted(open_tasks, key=sort_key)[0]
    reason = (
        f"Priority: {chosen.priority} | Status: {chosen.status.label} | "
        f"Progress: {chosen.feature_progress:.0f}%"
    )
    return Recommendation(
        action=action_phrase(chosen),
        priority=chosen.priority,
        phase_name=chosen.phase_name,
        feature_name=chosen.feature_name,
        task_name=chosen.name,
        status=chosen.status,
        estimated_effort=chosen.task.estimated_effort,
        reason=reason,
        feature_path=chosen.feature_dir,
        tasks_file=chosen.tasks_file,
    )


def summarize_open_work(open_tasks: Sequence[OpenTask]) -> OpenWorkSummary:
    statuses: List[TaskStatus] = [t.status for t in open_tasks]
    return OpenWorkSummary(
        total_incomplete=len(open_tasks),
        high_priority=sum(1 for t in open_tasks if priority_rank(t.priority) == PRIORITY_RANK["high"]),
        in_progress=statuses.count(TaskStatus.IN_PROGRESS),
        not_started=statuses.count(TaskStatus.NOT_STARTED),
        blocked=statuses.count(TaskStatus.BLOCKED),
        estimated_minutes=sum_durations(t.task.estimated_effort for t in open_tasks),
    )
