"""Task creation factory for trayplan.

This module centralizes task creation so generated and user-authored tasks get
consistent defaults.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from trayplan.models.phase import Phase, task_type_for_phase
from trayplan.models.task import Task, TaskKind, TaskSource, TaskStatus, TaskType


def make_generator_key(due_date: date, phase: Phase, kind: TaskKind) -> str:
    """Deterministic idempotency key for one (day, phase, kind) slot.

    Example: ``phase:2025-03-12:sow:detail``
    """
    return f"phase:{due_date.isoformat()}:{Phase(phase).value}:{TaskKind(kind).value}"


def create_generated_task(
    due_date: date,
    phase: Phase,
    kind: TaskKind,
    title: str,
) -> Task:
    """Create a generated task for a (day, phase, kind) slot.
    
    Args:
        due_date: Bucket day
        phase: Production phase of the bucket
        kind: summary or detail
        title: Rendered title
        
    Returns:
        Task owned by the synchronizer (status planned, source generated)
    """
    now = datetime.utcnow()
    return Task(
        id=str(uuid.uuid4()),
        title=title,
        due_date=due_date,
        status=TaskStatus.PLANNED,
        order_id=None,
        task_type=task_type_for_phase(phase),
        source=TaskSource.GENERATED,
        phase=Phase(phase),
        kind=kind,
        generator_key=make_generator_key(due_date, phase, kind),
        created_at=now,
        updated_at=now,
    )


def create_user_task(
    title: str,
    due_date: date,
    status: Optional[TaskStatus] = None,
    order_id: Optional[str] = None,
    task_type: Optional[TaskType] = None,
) -> Task:
    """Create a user-authored task (never touched by phase sync)."""
    now = datetime.utcnow()
    return Task(
        id=str(uuid.uuid4()),
        title=title.strip(),
        due_date=due_date,
        status=status if status is not None else TaskStatus.PLANNED,
        order_id=order_id,
        task_type=task_type,
        source=TaskSource.MANUAL,
        created_at=now,
        updated_at=now,
    )
