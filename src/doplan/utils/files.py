"""
JSON and file helpers for persisted plan state.

Writes go through a temporary sibling file that is renamed over the target,
so a reader never sees a half-written record. Malformed JSON always raises
StateFileError; callers holding a sensible default decide to downgrade it.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from doplan.errors import StateFileError, StateWriteError

log = logging.getLogger(__name__)


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StateWriteError(path, e) from e


def atomic_write_text(path: Path, content: str) -> None:
    """
    Replace path with content via write-to-temp-then-rename.

    The temporary file lives in the target's directory so os.replace stays
    on one filesystem. On failure the temporary file is removed and
    StateWriteError (carrying the target path) is raised.
    """
    ensure_dir(path.parent)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
        raise StateWriteError(path, e) from e
    log.debug("Wrote %s", path)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def read_json(path: Path) -> Any:
    """
    Load a JSON file.

    Raises:
        FileNotFoundError: path does not exist
        StateFileError: path exists but is not valid UTF-8 JSON
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StateFileError(path, str(e)) from e
