"""
Parser for feature tasks.md files.

Main API:
    parse_tasks(content)  → List[TaskRecord]
    parse_file(path)      → List[TaskRecord]

tasks.md is hand-edited markdown. A task starts at a "#### Task" heading and
runs until the next one; within it only two fields matter:

    #### Task 1: Set up database
    - **Status**: [ ] Not Started | [x] In Progress | [ ] Completed | [ ] Blocked
    - **Estimated Time**: 4 hours

Everything else (prose, acceptance criteria, notes) is ignored. Parsing is
lenient: unrecognised lines never raise, they just leave the defaults.

The parser is a two-state machine (OUTSIDE_TASK / IN_TASK). Each line is
classified into a LineKind and the (state, kind) pair is looked up in
_TRANSITIONS; pairs missing from the table leave the machine untouched.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from doplan.models.task import DEFAULT_EFFORT, TaskRecord, TaskStatus

TASK_HEADING = "#### Task"
STATUS_FIELD = "**Status**"
ESTIMATE_FIELD = "**Estimated Time**"

# Checked boxes, first match wins in this order
_STATUS_PATTERNS: List[Tuple[re.Pattern, TaskStatus]] = [
    (re.compile(r"\[[xX]\]\s*Completed"), TaskStatus.COMPLETED),
    (re.compile(r"\[[xX]\]\s*In Progress"), TaskStatus.IN_PROGRESS),
    (re.compile(r"\[[xX]\]\s*Blocked"), TaskStatus.BLOCKED),
]


class ParserState(Enum):
    OUTSIDE_TASK = "outside_task"
    IN_TASK = "in_task"


class LineKind(Enum):
    TASK_HEADING = "task_heading"
    STATUS_FIELD = "status_field"
    ESTIMATE_FIELD = "estimate_field"
    OTHER = "other"


def classify_line(line: str) -> LineKind:
    if line.startswith(TASK_HEADING):
        return LineKind.TASK_HEADING
    if STATUS_FIELD in line:
        return LineKind.STATUS_FIELD
    if ESTIMATE_FIELD in line:
        return LineKind.ESTIMATE_FIELD
    return LineKind.OTHER


def parse_status(line: str) -> TaskStatus:
    """Map a **Status** line to a TaskStatus. No checked box → NOT_STARTED."""
    for pattern, status in _STATUS_PATTERNS:
        if pattern.search(line):
            return status
    return TaskStatus.NOT_STARTED


def parse_estimate(line: str) -> Optional[str]:
    """Return the text after the first colon, or None if there is no colon."""
    if ":" not in line:
        return None
    return line.split(":", 1)[1].strip()


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class TaskListParser:
    """
    Incremental tasks.md parser.

    Feed lines with feed(); call finish() at end of input to flush the last
    open task. Completed tasks accumulate in .tasks.
    """

    def __init__(self) -> None:
        self.state = ParserState.OUTSIDE_TASK
        self.current: Optional[TaskRecord] = None
        self.tasks: List[TaskRecord] = []

    def feed(self, line: str) -> None:
        kind = classify_line(line)
        transition = _TRANSITIONS.get((self.state, kind))
        if transition is None:
            return
        action, next_state = transition
        action(self, line)
        self.state = next_state

    def finish(self) -> List[TaskRecord]:
        self._flush()
        self.state = ParserState.OUTSIDE_TASK
        return self.tasks

    # -- actions ----------------------------------------------------------

    def _flush(self) -> None:
        if self.current is not None:
            self.tasks.append(self.current)
            self.current = None

    def _open_task(self, line: str) -> None:
        self._flush()
        name = line[len(TASK_HEADING):].strip()
        self.current = TaskRecord(name=name, status=TaskStatus.NOT_STARTED, estimated_effort=DEFAULT_EFFORT)

    def _apply_status(self, line: str) -> None:
        self.current.status = parse_status(line)

    def _apply_estimate(self, line: str) -> None:
        estimate = parse_estimate(line)
        if estimate is not None:
            self.current.estimated_effort = estimate


_Action = Callable[[TaskListParser, str], None]

_TRANSITIONS: Dict[Tuple[ParserState, LineKind], Tuple[_Action, ParserState]] = {
    (ParserState.OUTSIDE_TASK, LineKind.TASK_HEADING): (TaskListParser._open_task, ParserState.IN_TASK),
    (ParserState.IN_TASK, LineKind.TASK_HEADING): (TaskListParser._open_task, ParserState.IN_TASK),
    (ParserState.IN_TASK, LineKind.STATUS_FIELD): (TaskListParser._apply_status, ParserState.IN_TASK),
    (ParserState.IN_TASK, LineKind.ESTIMATE_FIELD): (TaskListParser._apply_estimate, ParserState.IN_TASK),
}


# ---------------------------------------------------------------------------
# Main parse API
# ---------------------------------------------------------------------------

def iter_tasks(content: str) -> Iterator[TaskRecord]:
    """Yield tasks in document order."""
    parser = TaskListParser()
    for line in content.splitlines():
        parser.feed(line)
    yield from parser.finish()


def parse_tasks(content: str) -> List[TaskRecord]:
    """
    Parse tasks.md content into TaskRecords.

    Every "#### Task" heading produces exactly one record, including the
    last one in the file.
    """
    return list(iter_tasks(content))


def parse_file(file_path: Path) -> List[TaskRecord]:
    """Parse a tasks.md file into TaskRecords."""
    return parse_tasks(file_path.read_text(encoding="utf-8"))
