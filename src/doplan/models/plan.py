"""
Plan tree location models.

A "feature" is any directory directly under a phase directory that contains
a tasks.md file. Phases are the top-level directories under doplan/plan/.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_ORDINAL_PREFIX = re.compile(r"^\d+[-_. ]+")
_SEPARATORS = re.compile(r"[-_]+")


def display_name(dir_name: str) -> str:
    """
    Derive a human-readable name from a plan directory name.

    "02-user-auth" -> "user auth". Names without the NN-name ordinal prefix
    are kept verbatim apart from leading separators.
    """
    stripped = _ORDINAL_PREFIX.sub("", dir_name, count=1)
    if stripped == dir_name:
        return dir_name.lstrip("-_. ")
    return _SEPARATORS.sub(" ", stripped).strip()


@dataclass(frozen=True)
class FeatureLocation:
    """Where one feature's task list lives in the plan tree."""

    phase_dir: Path
    feature_dir: Path
    tasks_file: Path

    @property
    def phase_name(self) -> str:
        return display_name(self.phase_dir.name)

    @property
    def feature_name(self) -> str:
        return display_name(self.feature_dir.name)

    @property
    def sort_key(self) -> tuple:
        return (self.phase_dir.name, self.feature_dir.name)
