"""
Project configuration.

Every path the pipeline touches is derived from one explicit project root.
The root comes from the --root flag (CLI) or DOPLAN_ROOT (server); nothing
reads the process working directory implicitly.

Layout under the root:
    doplan/plan/<NN-phase>/<NN-feature>/tasks.md
    doplan/plan/<NN-phase>/<NN-feature>/progress.json
    doplan/plan/<NN-phase>/phase-progress.json
    doplan/dashboard.md
    .doplan/state.json
    .doplan/dashboard.json
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

TASKS_FILE_NAME = "tasks.md"
FEATURE_PROGRESS_FILE = "progress.json"
PHASE_PROGRESS_FILE = "phase-progress.json"

DEFAULT_PROJECT_NAME = "Untitled Project"


@dataclass(frozen=True)
class PlanConfig:
    root: Path
    project_name: Optional[str] = None
    workers: int = 1

    @property
    def doplan_dir(self) -> Path:
        return self.root / "doplan"

    @property
    def plan_dir(self) -> Path:
        return self.doplan_dir / "plan"

    @property
    def state_dir(self) -> Path:
        return self.root / ".doplan"

    @property
    def state_file(self) -> Path:
        return self.state_dir / "state.json"

    @property
    def dashboard_json(self) -> Path:
        return self.state_dir / "dashboard.json"

    @property
    def dashboard_md(self) -> Path:
        return self.doplan_dir / "dashboard.md"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, root: Optional[Path] = None) -> "PlanConfig":
        """
        Build a config from environment variables.

        DOPLAN_ROOT (project root), DOPLAN_PROJECT_NAME (dashboard title
        override) and DOPLAN_WORKERS (parallel feature parsing). An explicit
        root argument wins over DOPLAN_ROOT.
        """
        env = os.environ if environ is None else environ
        if root is None:
            root = Path(env.get("DOPLAN_ROOT", "."))
        return cls(
            root=root,
            project_name=env.get("DOPLAN_PROJECT_NAME") or None,
            workers=_parse_workers(env.get("DOPLAN_WORKERS", "1")),
        )


def _parse_workers(raw: str) -> int:
    try:
        return max(1, int(raw))
    except ValueError:
        return 1
