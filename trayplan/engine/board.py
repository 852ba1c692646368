"""Read-side helpers for the task board, calendar and dashboard.

Generated rows are classified from their structured ``source``/``kind``/
``task_type`` fields. Title parsing is only a fallback for rows written before
those columns existed, and for typing user-authored tasks by keyword.
"""

import re
from datetime import date
from typing import Dict, List, NamedTuple, Optional, Tuple

from trayplan.models.constants import DETAIL_SEPARATOR
from trayplan.models.phase import Phase, phase_label
from trayplan.models.task import Task, TaskKind, TaskSource, TaskType

_SYS_RE = re.compile(r"^sys:", re.IGNORECASE)
_SYS_DETAIL_RE = re.compile(r"^sys:detail:", re.IGNORECASE)

# Keyword prefixes for typing untagged tasks, checked in order
_TITLE_KEYWORDS: List[Tuple[str, TaskType]] = [
    ("soak", TaskType.SOAK),
    ("sow", TaskType.SOW),
    ("spray", TaskType.SPRAY),
    ("blackout", TaskType.BLACKOUT),
    ("lights on", TaskType.LIGHTS_ON),
    ("water", TaskType.WATER),
    ("harvest", TaskType.HARVEST),
    ("deliver", TaskType.DELIVERY),
]

BOARD_TYPE_ORDER: List[TaskType] = [
    TaskType.SOAK,
    TaskType.SOW,
    TaskType.SPRAY,
    TaskType.BLACKOUT,
    TaskType.LIGHTS_ON,
    TaskType.WATER,
    TaskType.HARVEST,
    TaskType.DELIVERY,
    TaskType.OTHER,
]


class BoardItem(NamedTuple):
    """One row on a day's board; ``detail`` is the breakdown for generated summaries."""
    task: Task
    task_type: TaskType
    title: str
    generated: bool
    detail: Optional[str]


def is_generated(task: Task) -> bool:
    if task.source is not None:
        return task.source == TaskSource.GENERATED
    return bool(_SYS_RE.match(task.title or ""))


def is_detail(task: Task) -> bool:
    if task.kind is not None:
        return task.kind == TaskKind.DETAIL
    return bool(_SYS_DETAIL_RE.match(task.title or ""))


def clean_title(title: str) -> str:
    """Strip the generated-task markers from a title."""
    stripped = _SYS_DETAIL_RE.sub("", title or "")
    return _SYS_RE.sub("", stripped).strip()


def classify_task(task: Task) -> TaskType:
    """Task type from the stored tag, else from the title's leading keyword."""
    if task.task_type:
        return TaskType(task.task_type)
    text = clean_title(task.title).lower()
    for keyword, task_type in _TITLE_KEYWORDS:
        if text.startswith(keyword):
            return task_type
    return TaskType.OTHER


def detail_text(task: Task) -> str:
    """Breakdown part of a generated detail title (text after the phase label)."""
    title = clean_title(task.title)
    if task.phase:
        prefix = f"{phase_label(Phase(task.phase))}{DETAIL_SEPARATOR}"
        if title.startswith(prefix):
            return title[len(prefix):]
    # Labels may themselves contain the separator, so split on the last one
    _, _, rest = title.rpartition(DETAIL_SEPARATOR)
    return rest


def build_day_board(tasks: List[Task], day: date) -> List[BoardItem]:
    """Board rows for one day.

    Generated detail rows are folded into their summary row; user-authored tasks
    appear as-is. Rows are ordered by task type, then title.
    """
    todays = [t for t in tasks if t.due_date == day]

    details: Dict[str, str] = {}
    for task in todays:
        if task.phase and is_generated(task) and is_detail(task):
            details[task.phase] = detail_text(task)

    items: List[BoardItem] = []
    for task in todays:
        generated = is_generated(task)
        if generated and is_detail(task):
            continue
        items.append(
            BoardItem(
                task=task,
                task_type=classify_task(task),
                title=clean_title(task.title),
                generated=generated,
                detail=details.get(task.phase) if generated and task.phase else None,
            )
        )

    items.sort(key=lambda item: (BOARD_TYPE_ORDER.index(item.task_type), item.title.lower()))
    return items
