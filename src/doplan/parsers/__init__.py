from .task_parser import parse_file, parse_tasks, iter_tasks, TaskListParser
from .plan_scanner import scan_plan, plan_exists, is_feature_dir

__all__ = [
    "parse_file",
    "parse_tasks",
    "iter_tasks",
    "TaskListParser",
    "scan_plan",
    "plan_exists",
    "is_feature_dir",
]
