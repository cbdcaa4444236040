"""
Canonical rendering helpers for progress output.

Single source of truth for how percentages and progress bars look, shared by
the dashboard markdown writer and the CLI.
"""

from typing import Union

BAR_WIDTH = 30
BAR_FILLED = "█"
BAR_EMPTY = "░"

STATUS_ICONS = {
    "completed": "✓",
    "in_progress": "→",
    "not_started": "○",
    "blocked": "⚠",
}


def clamp_percent(value: Union[int, float]) -> float:
    return min(100.0, max(0.0, float(value)))


def progress_bar(progress: Union[int, float], width: int = BAR_WIDTH) -> str:
    """
    Render a fixed-width bar, filled proportionally and floor-rounded.

    progress_bar(50.0) → "[███████████████░░░░░░░░░░░░░░░]"
    """
    filled = int(clamp_percent(progress) / 100.0 * width)
    return f"[{BAR_FILLED * filled}{BAR_EMPTY * (width - filled)}]"


def format_percent(progress: Union[int, float]) -> str:
    return f"{float(progress):.1f}%"


def format_status(status: str) -> str:
    """Prefix a persisted status value with its icon."""
    icon = STATUS_ICONS.get(status)
    return f"{icon} {status}" if icon else status


RULE = "━" * 40


def banner(title: str) -> str:
    """Three-line section header used by the CLI."""
    return f"{RULE}\n  {title}\n{RULE}"
