"""
Timestamp and duration utilities.

Pure functions, no external dependencies. Durations come from the free-text
"**Estimated Time**" field of tasks.md, so parsing is best-effort.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def isoformat(moment: datetime) -> str:
    """RFC 3339 / ISO 8601 timestamp used for every updated_at field."""
    return moment.isoformat()


def human_timestamp(moment: datetime) -> str:
    """Timestamp for the dashboard markdown title block."""
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def duration_to_minutes(duration_str: str) -> Optional[int]:
    """
    Parse a duration string into total minutes.

    Supports: "2h", "30m", "2d", "2h30m", "2.5h", "4 hours", "45 minutes".
    Placeholders like "Unknown" or "[Hours]" return None.
    """
    if not duration_str:
        return None

    s = duration_str.strip().lower()
    total = 0

    days = re.search(r'(\d+(?:\.\d+)?)\s*(?:d|days?)', s)
    if days:
        total += int(float(days.group(1)) * 24 * 60)

    hours = re.search(r'(\d+(?:\.\d+)?)\s*(?:h|hrs?|hours?)', s)
    if hours:
        total += int(float(hours.group(1)) * 60)

    minutes = re.search(r'(\d+)\s*(?:m|mins?|minutes?)', s)
    if minutes:
        total += int(minutes.group(1))

    return total if total > 0 else None


def minutes_to_duration(total_minutes: int) -> Optional[str]:
    """Format minutes as a compact duration string (e.g. "2h30m", "3d")."""
    if not total_minutes:
        return None

    days, remainder = divmod(total_minutes, 24 * 60)
    hours, mins = divmod(remainder, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if mins:
        parts.append(f"{mins}m")

    return "".join(parts) if parts else None


def sum_durations(estimates: Iterable[str]) -> int:
    """Total minutes across the estimates that parse; the rest are skipped."""
    return sum(duration_to_minutes(e) or 0 for e in estimates)
