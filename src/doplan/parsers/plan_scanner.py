"""
Plan tree scanner.

A "feature" is any directory that contains a tasks.md file and sits directly
under a phase directory:

    doplan/plan/
        01-foundation/              ← phase
            01-project-setup/       ← feature
                tasks.md
            02-user-auth/
                tasks.md
        02-core-features/
            ...

Only that fixed depth is examined, so unrelated subtrees (assets, notes,
nested scratch directories) are never walked. Hidden directories are skipped.
"""

import logging
from pathlib import Path
from typing import Iterator, List

from doplan.config import TASKS_FILE_NAME
from doplan.models.plan import FeatureLocation

log = logging.getLogger(__name__)


def _is_candidate_dir(path: Path) -> bool:
    return path.is_dir() and not path.name.startswith(".")


def is_feature_dir(path: Path) -> bool:
    """Return True if path is a directory containing a tasks.md file."""
    try:
        return path.is_dir() and (path / TASKS_FILE_NAME).is_file()
    except OSError as e:
        log.warning("Skipping unreadable directory %s: %s", path, e)
        return False


def plan_exists(plan_dir: Path) -> bool:
    """True if the plan root has been created."""
    return plan_dir.is_dir()


def _sorted_subdirs(path: Path) -> List[Path]:
    """Visible subdirectories by name. An unreadable directory has none."""
    try:
        children = [child for child in path.iterdir() if _is_candidate_dir(child)]
    except OSError as e:
        log.warning("Skipping unreadable directory %s: %s", path, e)
        return []
    return sorted(children, key=lambda p: p.name)


def scan_plan(plan_dir: Path) -> Iterator[FeatureLocation]:
    """
    Lazily yield every feature in the plan tree.

    Args:
        plan_dir: Path to <root>/doplan/plan/

    Yields:
        FeatureLocation per <phase>/<feature>/tasks.md, ordered by phase
        directory name then feature directory name. An absent plan_dir
        yields nothing.
    """
    if not plan_exists(plan_dir):
        log.debug("Plan directory does not exist: %s", plan_dir)
        return

    for phase_dir in _sorted_subdirs(plan_dir):
        for feature_dir in _sorted_subdirs(phase_dir):
            if not is_feature_dir(feature_dir):
                # Directories without tasks.md are not features; skip silently
                continue
            yield FeatureLocation(
                phase_dir=phase_dir,
                feature_dir=feature_dir,
                tasks_file=feature_dir / TASKS_FILE_NAME,
            )
