from .task import OpenTask, TaskRecord, TaskStatus, STATUS_RANK
from .plan import FeatureLocation, display_name
from .progress import FeatureProgress, PhaseProgress, ProjectDashboard, TaskStats

__all__ = [
    "OpenTask",
    "TaskRecord",
    "TaskStatus",
    "STATUS_RANK",
    "FeatureLocation",
    "display_name",
    "FeatureProgress",
    "PhaseProgress",
    "ProjectDashboard",
    "TaskStats",
]
