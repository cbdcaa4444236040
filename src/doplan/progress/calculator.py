"""
Progress roll-up calculations.

Feature progress is the share of completed tasks. Phase and overall progress
are unweighted means over immediate children: a feature with one task counts
as much as a feature with fifty. None of these functions can fail; empty
inputs produce 0%.
"""

from typing import Iterable, List, Sequence, Tuple

from doplan.models.progress import FeatureProgress, PhaseProgress, TaskStats
from doplan.models.task import TaskRecord, TaskStatus
from doplan.utils.formatting import clamp_percent


def compute_task_stats(tasks: Iterable[TaskRecord]) -> TaskStats:
    counts = {s: 0 for s in TaskStatus}
    for task in tasks:
        counts[task.status] += 1
    return TaskStats(
        completed=counts[TaskStatus.COMPLETED],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        not_started=counts[TaskStatus.NOT_STARTED],
        blocked=counts[TaskStatus.BLOCKED],
    )


def derive_status(progress: float, in_progress: int, blocked: int) -> TaskStatus:
    """
    Status from progress and counts, in priority order:
    100% → COMPLETED, any in progress → IN_PROGRESS, any blocked → BLOCKED,
    otherwise NOT_STARTED (including the empty case).
    """
    if progress >= 100.0:
        return TaskStatus.COMPLETED
    if in_progress > 0:
        return TaskStatus.IN_PROGRESS
    if blocked > 0:
        return TaskStatus.BLOCKED
    return TaskStatus.NOT_STARTED


def percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return clamp_percent(part / whole * 100.0)


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return clamp_percent(sum(values) / len(values))


def compute_feature_progress(stats: TaskStats) -> Tuple[float, TaskStatus]:
    progress = percent(stats.completed, stats.total)
    return progress, derive_status(progress, stats.in_progress, stats.blocked)


def compute_phase_progress(features: Sequence[FeatureProgress]) -> float:
    return mean([f.progress for f in features])


def derive_phase_status(progress: float, features: Sequence[FeatureProgress]) -> TaskStatus:
    """Same ordering as feature status, applied to features counted by status."""
    in_progress = sum(1 for f in features if f.status is TaskStatus.IN_PROGRESS)
    blocked = sum(1 for f in features if f.status is TaskStatus.BLOCKED)
    return derive_status(progress, in_progress, blocked)


def compute_overall_progress(phases: Sequence[PhaseProgress]) -> float:
    return mean([p.progress for p in phases])


def build_phase(phase_name: str, features: List[FeatureProgress], phase_dir=None) -> PhaseProgress:
    progress = compute_phase_progress(features)
    return PhaseProgress(
        phase_name=phase_name,
        progress=progress,
        status=derive_phase_status(progress, features),
        features=features,
        phase_dir=phase_dir,
    )
