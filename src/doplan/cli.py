#!/usr/bin/env python3
"""
doplan - plan progress tracking CLI

Usage:
    doplan [--root DIR] progress [--dry-run] [--workers N]
    doplan [--root DIR] next
    doplan [--root DIR] dashboard

Examples:
    doplan progress
    doplan --root ~/work/shop next
    doplan progress --dry-run --workers 4
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from doplan.commands import dashboard, next as next_cmd, progress
from doplan.config import PlanConfig
from doplan.errors import PlanProgressError

log = logging.getLogger(__name__)


def make_parser():
    parser = argparse.ArgumentParser(prog='doplan', description='Track project plan progress')
    parser.add_argument('--root', default=os.environ.get('DOPLAN_ROOT', '.'),
                        help='Project root containing doplan/plan/ (default: $DOPLAN_ROOT or .)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    for module in [progress, next_cmd, dashboard]:
        module.add_commands(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not getattr(args, 'func', None):
        parser.print_help()
        return 1

    args.config = PlanConfig.from_env(root=Path(args.root).expanduser())

    try:
        return args.func(args)
    except PlanProgressError as e:
        log.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
