"""
Persist computed progress back into the plan tree.

Files written per run:
    <feature>/progress.json         one per feature
    <phase>/phase-progress.json     one per phase
    .doplan/dashboard.json          machine-readable snapshot
    doplan/dashboard.md             human-readable snapshot

Every record is a full replacement; nothing is merged with the previous
version. All contents are rendered into a staging set first and only
committed once rendering has succeeded for every file, and each file is
swapped in atomically. A crash can still stop a commit half-way, leaving
some files from the previous run; the next successful run repairs that.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from doplan.config import FEATURE_PROGRESS_FILE, PHASE_PROGRESS_FILE, PlanConfig
from doplan.models.progress import FeatureProgress, PhaseProgress, ProjectDashboard
from doplan.utils.dates import human_timestamp, isoformat, utc_now
from doplan.utils.files import atomic_write_text, dump_json
from doplan.utils.formatting import format_percent, progress_bar

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Record shapes
# ---------------------------------------------------------------------------

def feature_record(feature: FeatureProgress, updated_at: str) -> dict:
    return {
        "feature": feature.feature_name,
        "priority": feature.priority,
        "status": feature.status.value,
        "progress": feature.progress,
        "tasks": feature.tasks.to_dict(),
        "updated_at": updated_at,
    }


def phase_record(phase: PhaseProgress, updated_at: str) -> dict:
    return {
        "phase": phase.phase_name,
        "status": phase.status.value,
        "progress": phase.progress,
        "features": phase.feature_counts().to_dict(),
        "updated_at": updated_at,
    }


def dashboard_record(dashboard: ProjectDashboard) -> dict:
    return {
        "project_name": dashboard.project_name,
        "overall_progress": dashboard.overall_progress,
        "phases": [
            {
                "name": phase.phase_name,
                "progress": phase.progress,
                "status": phase.status.value,
                "features": [
                    {
                        "name": f.feature_name,
                        "priority": f.priority,
                        "progress": f.progress,
                        "status": f.status.value,
                        "tasks": f.tasks.to_dict(),
                    }
                    for f in phase.features
                ],
            }
            for phase in dashboard.phases
        ],
        "updated_at": dashboard.updated_at,
    }


def render_dashboard_markdown(dashboard: ProjectDashboard, moment: datetime) -> str:
    lines = [
        "# Project Dashboard",
        "",
        f"**Project:** {dashboard.project_name}",
        "",
        f"**Last Updated:** {human_timestamp(moment)}",
        "",
        "---",
        "",
        "## Overall Progress",
        "",
        f"**{format_percent(dashboard.overall_progress)}** Complete",
        "",
        progress_bar(dashboard.overall_progress),
        "",
        "## Phase Progress",
        "",
    ]

    for phase in dashboard.phases:
        lines += [
            f"### {phase.phase_name}",
            "",
            f"**{format_percent(phase.progress)}** Complete",
            "",
            progress_bar(phase.progress),
            "",
            "#### Features",
            "",
        ]
        for f in phase.features:
            lines.append(
                f"- **{f.feature_name}** ({f.priority}) - {format_percent(f.progress)} - {f.status.value}"
            )
        lines.append("")

    totals = dashboard.task_totals()
    lines += [
        "## Task Summary",
        "",
        f"- **Total Tasks:** {totals.total}",
        f"- **Completed:** {totals.completed}",
        f"- **In Progress:** {totals.in_progress}",
        f"- **Not Started:** {totals.not_started}",
    ]
    if totals.blocked > 0:
        lines.append(f"- **Blocked:** {totals.blocked}")
    lines.append("")

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# StateWriter
# ---------------------------------------------------------------------------

class StateWriter:
    """
    Stage-then-commit writer for one progress run.

    Usage:
        writer = StateWriter(config)
        writer.stage_dashboard(dashboard, moment)
        written = writer.commit()
    """

    def __init__(self, config: PlanConfig) -> None:
        self._config = config
        self._staged: Dict[Path, str] = {}

    @property
    def staged_paths(self) -> List[Path]:
        return list(self._staged)

    def stage(self, path: Path, content: str) -> None:
        self._staged[path] = content

    def stage_feature(self, feature: FeatureProgress, updated_at: str) -> None:
        if feature.feature_dir is None:
            log.warning("Feature %s has no directory; not persisted", feature.feature_name)
            return
        self.stage(feature.feature_dir / FEATURE_PROGRESS_FILE, dump_json(feature_record(feature, updated_at)))

    def stage_phase(self, phase: PhaseProgress, updated_at: str) -> None:
        if phase.phase_dir is None:
            log.warning("Phase %s has no directory; not persisted", phase.phase_name)
            return
        self.stage(phase.phase_dir / PHASE_PROGRESS_FILE, dump_json(phase_record(phase, updated_at)))

    def stage_dashboard(self, dashboard: ProjectDashboard, moment: Optional[datetime] = None) -> None:
        """Stage every record derived from the dashboard, stamped with one timestamp."""
        moment = moment or utc_now()
        updated_at = isoformat(moment)
        dashboard.updated_at = updated_at

        for phase in dashboard.phases:
            for feature in phase.features:
                self.stage_feature(feature, updated_at)
            self.stage_phase(phase, updated_at)

        self.stage(self._config.dashboard_json, dump_json(dashboard_record(dashboard)))
        self.stage(self._config.dashboard_md, render_dashboard_markdown(dashboard, moment))

    def commit(self) -> List[Path]:
        """
        Write every staged file and clear the staging set.

        Raises:
            StateWriteError: a write failed; the error carries the path
        """
        written: List[Path] = []
        for path, content in self._staged.items():
            atomic_write_text(path, content)
            written.append(path)
        self._staged.clear()
        log.info("Committed %d progress file(s)", len(written))
        return written
