#!/usr/bin/env python3

import argparse
from dataclasses import replace

from doplan.operations import recompute_progress
from doplan.utils.formatting import banner, format_percent, progress_bar


def update_progress(args: argparse.Namespace) -> int:
    config = args.config
    if args.workers:
        config = replace(config, workers=max(1, args.workers))

    print(banner("DoPlan: Progress Update"))
    print()

    result = recompute_progress(config, dry_run=args.dry_run)
    if result is None:
        print("No plan structure found. Create doplan/plan/ first.")
        return 0

    dashboard = result.dashboard
    print(banner("Progress Update Complete!" if not result.dry_run else "Progress Preview (dry run)"))
    print()
    print(f"Overall Progress: {format_percent(dashboard.overall_progress)}")
    print()

    if not dashboard.phases:
        print("No features with tasks.md found.")
    else:
        print("Phase Progress:")
        for phase in dashboard.phases:
            print(f"  → {phase.phase_name}: {format_percent(phase.progress)} {progress_bar(phase.progress)}")
    print()

    print("Files that would be updated:" if result.dry_run else "Files updated:")
    for path in result.files:
        print(f"  • {path}")
    print()
    return 0


def add_commands(subparser, common=None):
    progress = subparser.add_parser(
        'progress',
        description='Recompute progress for every feature and phase and regenerate the dashboard',
        parents=[common] if common else [],
    )
    progress.add_argument('--dry-run', action='store_true', help='Compute without writing any files')
    progress.add_argument('--workers', type=int, default=None, help='Parse features on N threads')
    progress.set_defaults(func=update_progress)
