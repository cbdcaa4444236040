from .calculator import (
    compute_feature_progress,
    compute_overall_progress,
    compute_phase_progress,
    compute_task_stats,
    derive_phase_status,
    derive_status,
)
from .recommend import OpenWorkSummary, Recommendation, recommend, summarize_open_work

__all__ = [
    "compute_feature_progress",
    "compute_overall_progress",
    "compute_phase_progress",
    "compute_task_stats",
    "derive_phase_status",
    "derive_status",
    "OpenWorkSummary",
    "Recommendation",
    "recommend",
    "summarize_open_work",
]
