#!/usr/bin/env python3

import argparse

from doplan.operations import recommend_next
from doplan.utils.dates import minutes_to_duration
from doplan.utils.formatting import banner


def show_next(args: argparse.Namespace) -> int:
    print(banner("DoPlan: Next Action Recommendation"))
    print()

    result = recommend_next(args.config)
    if result is None:
        print("No plan structure found. Create doplan/plan/ first.")
        return 0

    rec = result.recommendation
    if rec is None:
        print("🎉 All tasks are complete!")
        print()
        print("No incomplete tasks found. Great work!")
        return 0

    print(banner("📋 Recommended Next Action"))
    print()
    print(rec.action)
    print()
    print("Details:")
    print(f"  → Phase: {rec.phase_name}")
    print(f"  → Feature: {rec.feature_name}")
    print(f"  → Task: {rec.task_name}")
    print(f"  → Priority: {rec.priority}")
    print(f"  → Estimated Effort: {rec.estimated_effort}")
    print()
    print("Reason:")
    print(f"  {rec.reason}")
    print()
    print("Task File:")
    print(f"  {rec.tasks_file}")
    print()

    summary = result.summary
    print(banner("📊 Project Status Summary"))
    print()
    print(f"  → Total Incomplete Tasks: {summary.total_incomplete}")
    print(f"  → High Priority: {summary.high_priority}")
    print(f"  → In Progress: {summary.in_progress}")
    print(f"  → Not Started: {summary.not_started}")
    if summary.blocked > 0:
        print(f"  → Blocked: {summary.blocked}")
    remaining = minutes_to_duration(summary.estimated_minutes)
    if remaining:
        print(f"  → Estimated Remaining Effort: {remaining}")
    print()

    print("Next Steps:")
    print(f"  1. Review the recommended task in: {rec.tasks_file}")
    print("  2. Start working on the task")
    print("  3. Update tasks.md as you make progress")
    print("  4. Run 'doplan progress' to refresh the dashboard")
    print()
    return 0


def add_commands(subparser, common=None):
    next_cmd = subparser.add_parser(
        'next',
        description='Recommend the next task to work on (read-only)',
        parents=[common] if common else [],
    )
    next_cmd.set_defaults(func=show_next)
