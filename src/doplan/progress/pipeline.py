"""
Scan → parse → calculate.

Everything is read from the plan tree and held in memory before any write
happens. Each feature's tasks.md is parsed exactly once; the resulting
snapshots feed both the progress roll-up (counts) and the recommendation
engine (open tasks), so the two views cannot drift apart.

Feature loading has no cross-feature dependencies and may run on a thread
pool. Results are always re-sorted by (phase dir, feature dir) before
aggregation, so output does not depend on completion order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path
from typing import List, Optional

from doplan.config import PlanConfig
from doplan.models.plan import FeatureLocation
from doplan.models.progress import FeatureProgress, ProjectDashboard
from doplan.models.task import OpenTask, TaskRecord
from doplan.parsers.plan_scanner import scan_plan
from doplan.parsers.task_parser import parse_file
from doplan.progress.calculator import (
    build_phase,
    compute_feature_progress,
    compute_overall_progress,
    compute_task_stats,
)
from doplan.state.store import read_priority, read_project_name

log = logging.getLogger(__name__)


@dataclass
class FeatureSnapshot:
    """One feature's parsed state: where it lives, its priority, its tasks."""

    location: FeatureLocation
    priority: str
    tasks: List[TaskRecord] = field(default_factory=list)

    def progress(self) -> FeatureProgress:
        stats = compute_task_stats(self.tasks)
        progress, status = compute_feature_progress(stats)
        return FeatureProgress(
            feature_name=self.location.feature_name,
            phase_name=self.location.phase_name,
            priority=self.priority,
            progress=progress,
            status=status,
            tasks=stats,
            feature_dir=self.location.feature_dir,
        )


def load_feature(location: FeatureLocation) -> Optional[FeatureSnapshot]:
    """Parse one feature. Unreadable task lists are skipped with a warning."""
    try:
        tasks = parse_file(location.tasks_file)
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Skipping unreadable task list %s: %s", location.tasks_file, e)
        return None
    return FeatureSnapshot(
        location=location,
        priority=read_priority(location.feature_dir),
        tasks=tasks,
    )


def load_features(plan_dir: Path, workers: int = 1) -> List[FeatureSnapshot]:
    """Load every feature in the plan tree, sorted by (phase dir, feature dir)."""
    locations = list(scan_plan(plan_dir))
    log.debug("Found %d feature(s) under %s", len(locations), plan_dir)

    if workers > 1 and len(locations) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="doplan-scan") as executor:
            loaded = list(executor.map(load_feature, locations))
    else:
        loaded = [load_feature(loc) for loc in locations]

    snapshots = [s for s in loaded if s is not None]
    snapshots.sort(key=lambda s: s.location.sort_key)
    return snapshots


def collect_open_tasks(snapshots: List[FeatureSnapshot]) -> List[OpenTask]:
    """Every uncompleted task, with its feature context, in discovery order."""
    open_tasks: List[OpenTask] = []
    for snapshot in snapshots:
        feature = snapshot.progress()
        for task in snapshot.tasks:
            if task.is_completed:
                continue
            open_tasks.append(
                OpenTask(
                    task=task,
                    phase_name=feature.phase_name,
                    feature_name=feature.feature_name,
                    priority=feature.priority,
                    feature_progress=feature.progress,
                    feature_dir=feature.feature_dir,
                )
            )
    return open_tasks


def build_dashboard(config: PlanConfig, snapshots: Optional[List[FeatureSnapshot]] = None) -> ProjectDashboard:
    """
    Roll features up into phases and phases into the project.

    Phases appear in directory-name order; a phase with no feature units is
    not part of the model.
    """
    if snapshots is None:
        snapshots = load_features(config.plan_dir, workers=config.workers)

    phases = []
    for phase_dir, group in groupby(snapshots, key=lambda s: s.location.phase_dir):
        features = [s.progress() for s in group]
        phases.append(build_phase(features[0].phase_name, features, phase_dir=phase_dir))

    return ProjectDashboard(
        project_name=read_project_name(config),
        overall_progress=compute_overall_progress(phases),
        phases=phases,
    )
