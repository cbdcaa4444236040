"""
The three user-facing operations, shared by the CLI, MCP tools and REST API.

    recompute_progress  scan, aggregate and persist (or dry-run)
    recommend_next      scan, parse and select; read-only
    show_dashboard      read the persisted snapshot; never recomputes

recompute_progress and recommend_next return None when the plan tree does not
exist yet, which callers report as guidance rather than an error.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from doplan.config import PlanConfig
from doplan.models.progress import ProjectDashboard
from doplan.parsers.plan_scanner import plan_exists
from doplan.progress.pipeline import build_dashboard, collect_open_tasks, load_features
from doplan.progress.recommend import OpenWorkSummary, Recommendation, recommend, summarize_open_work
from doplan.state.store import load_dashboard
from doplan.state.writer import StateWriter

log = logging.getLogger(__name__)


@dataclass
class ProgressResult:
    dashboard: ProjectDashboard
    files: List[Path] = field(default_factory=list)
    dry_run: bool = False


@dataclass
class NextResult:
    recommendation: Optional[Recommendation]
    summary: OpenWorkSummary

    @property
    def all_complete(self) -> bool:
        return self.recommendation is None


def recompute_progress(
    config: PlanConfig,
    dry_run: bool = False,
    moment: Optional[datetime] = None,
) -> Optional[ProgressResult]:
    """
    Rebuild every progress record from the plan tree and persist them.

    With dry_run the records are computed and rendered but nothing is
    written; files lists the paths that would have been written.
    """
    if not plan_exists(config.plan_dir):
        log.info("No plan structure at %s", config.plan_dir)
        return None

    dashboard = build_dashboard(config)

    writer = StateWriter(config)
    writer.stage_dashboard(dashboard, moment)
    if dry_run:
        return ProgressResult(dashboard=dashboard, files=writer.staged_paths, dry_run=True)

    files = writer.commit()
    return ProgressResult(dashboard=dashboard, files=files)


def recommend_next(config: PlanConfig) -> Optional[NextResult]:
    """Pick the next task across the whole plan without writing anything."""
    if not plan_exists(config.plan_dir):
        log.info("No plan structure at %s", config.plan_dir)
        return None

    open_tasks = collect_open_tasks(load_features(config.plan_dir, workers=config.workers))
    return NextResult(
        recommendation=recommend(open_tasks),
        summary=summarize_open_work(open_tasks),
    )


def show_dashboard(config: PlanConfig) -> Any:
    """
    Return the persisted dashboard snapshot.

    Raises:
        DashboardNotFoundError: `doplan progress` has not been run yet
        StateFileError: the snapshot is not valid JSON
    """
    return load_dashboard(config)
