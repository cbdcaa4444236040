#!/usr/bin/env python3

import argparse
import math
from typing import Any, List

from doplan.errors import DashboardNotFoundError
from doplan.operations import show_dashboard
from doplan.utils.formatting import banner, format_percent, format_status, progress_bar


def _number(value: Any, default: float = 0.0) -> float:
    """Finite JSON numbers only; anything else (bool, NaN, Infinity) is the default."""
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return float(value)
    return default


def render_dashboard(data: dict) -> str:
    """
    Render a dashboard snapshot for the terminal.

    The snapshot may have been hand-edited or written by an older version, so
    missing fields are skipped rather than treated as errors.
    """
    lines: List[str] = [banner("DoPlan: Project Dashboard"), ""]

    if isinstance(data.get("project_name"), str):
        lines.append(f"Project: {data['project_name']}")
    if isinstance(data.get("updated_at"), str):
        lines.append(f"Last Updated: {data['updated_at']}")
    lines.append("")

    if "overall_progress" in data:
        overall = _number(data.get("overall_progress"))
        lines += [banner("Overall Progress"), "", format_percent(overall), progress_bar(overall), ""]

    phases = data.get("phases")
    if not isinstance(phases, list):
        phases = []

    if phases:
        lines += [banner("Phase Progress"), ""]
    totals = {"total": 0, "completed": 0, "in_progress": 0, "not_started": 0, "blocked": 0}

    for phase in phases:
        if not isinstance(phase, dict):
            continue
        progress = _number(phase.get("progress"))
        lines += [
            f"Phase: {phase.get('name', 'unknown')}",
            f"  Progress: {format_percent(progress)}",
            f"  Status: {format_status(str(phase.get('status', 'unknown')))}",
            f"  {progress_bar(progress)}",
            "",
        ]

        features = phase.get("features")
        features = [f for f in features if isinstance(f, dict)] if isinstance(features, list) else []
        if features:
            lines.append("  Features:")
            for feature in features:
                lines.append(
                    f"    → {feature.get('name', 'unknown')} ({feature.get('priority', 'unknown')}) - "
                    f"{format_percent(_number(feature.get('progress')))} - "
                    f"{format_status(str(feature.get('status', 'unknown')))}"
                )
                tasks = feature.get("tasks")
                if isinstance(tasks, dict):
                    for key in totals:
                        totals[key] += int(_number(tasks.get(key)))
            lines.append("")

    lines += [
        banner("Task Summary"),
        "",
        f"  Total Tasks: {totals['total']}",
        f"  ✓ Completed: {totals['completed']}",
        f"  → In Progress: {totals['in_progress']}",
        f"  ○ Not Started: {totals['not_started']}",
    ]
    if totals["blocked"] > 0:
        lines.append(f"  ⚠ Blocked: {totals['blocked']}")
    lines.append("")
    return "\n".join(lines)


def display_dashboard(args: argparse.Namespace) -> int:
    try:
        data = show_dashboard(args.config)
    except DashboardNotFoundError:
        print("Dashboard not found. Run 'doplan progress' first to generate it.")
        print()
        return 0

    print(render_dashboard(data))
    return 0


def add_commands(subparser, common=None):
    dashboard = subparser.add_parser(
        'dashboard',
        description='Show the last generated project dashboard',
        parents=[common] if common else [],
    )
    dashboard.set_defaults(func=display_dashboard)
