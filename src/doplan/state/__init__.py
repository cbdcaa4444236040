from .store import load_dashboard, read_priority, read_project_name
from .writer import StateWriter, render_dashboard_markdown

__all__ = [
    "load_dashboard",
    "read_priority",
    "read_project_name",
    "StateWriter",
    "render_dashboard_markdown",
]
