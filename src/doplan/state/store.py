"""
Readers for persisted plan state.

Malformed JSON is handled by one rule: read_json always raises
StateFileError. Lookups that exist only to fill an auxiliary field and have
a documented default (feature priority, project name) log a warning and use
the default. The dashboard snapshot has no fallback, so load_dashboard lets
the error propagate.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from doplan.config import DEFAULT_PROJECT_NAME, FEATURE_PROGRESS_FILE, PlanConfig
from doplan.errors import DashboardNotFoundError, StateFileError
from doplan.models.progress import DEFAULT_PRIORITY
from doplan.utils.files import read_json

log = logging.getLogger(__name__)


def _read_string_field(path: Path, key: str) -> Optional[str]:
    """Return data[key] if path holds a JSON object with a string there."""
    if not path.is_file():
        return None
    try:
        data = read_json(path)
    except StateFileError as e:
        log.warning("Ignoring malformed %s: %s", path, e.reason)
        return None
    except OSError as e:
        log.warning("Could not read %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a JSON object", path)
        return None
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        log.warning("Ignoring %s in %s: expected a non-empty string", key, path)
        return None
    return value.strip()


def read_priority(feature_dir: Path) -> str:
    """Priority recorded in the feature's progress.json, default "medium"."""
    return _read_string_field(feature_dir / FEATURE_PROGRESS_FILE, "priority") or DEFAULT_PRIORITY


def read_project_name(config: PlanConfig) -> str:
    """Configured name, else .doplan/state.json project_name, else the default."""
    if config.project_name:
        return config.project_name
    return _read_string_field(config.state_file, "project_name") or DEFAULT_PROJECT_NAME


def load_dashboard(config: PlanConfig) -> Any:
    """
    Load the dashboard snapshot for display.

    Raises:
        DashboardNotFoundError: the snapshot has not been generated yet
        StateFileError: the snapshot exists but is not valid JSON
    """
    path = config.dashboard_json
    if not path.is_file():
        raise DashboardNotFoundError(path)
    data = read_json(path)
    if not isinstance(data, dict):
        raise StateFileError(path, "expected a JSON object")
    return data
