"""Phase-task synchronization for trayplan.

Regenerates the machine-owned task rows for a window of days from current order
state:

1. delete every generated task due inside the window
2. load all non-delivered orders (joined with customer and variety)
3. project, aggregate and render each (day, phase) bucket
4. upsert two rows (summary + detail) per non-empty bucket, keyed by generator key

Steps 1-4 run in one transaction, so a failure leaves the window as it was.
Overlapping windows must not be synced concurrently; callers serialize syncs.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from trayplan.database.order_repository import OrderRepository
from trayplan.database.repository import TaskRepository
from trayplan.engine.aggregator import PhaseAggregator
from trayplan.engine.dates import DayLike, enumerate_dates
from trayplan.engine.projector import project_order
from trayplan.engine.renderer import render_phase
from trayplan.models.order import ActiveOrder
from trayplan.models.phase import PHASE_ORDER
from trayplan.models.task import Task, TaskKind
from trayplan.models.task_factory import create_generated_task

logger = logging.getLogger(__name__)


class PhaseSyncError(Exception):
    """Raised when a sync fails; ``stage`` is "window", "delete", "load" or "write"."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"Phase task sync failed during {stage}: {message}")
        self.stage = stage


class SyncResult:
    """Result of a sync operation."""
    
    def __init__(self):
        self.start_date: Optional[date] = None
        self.end_date: Optional[date] = None
        self.deleted_count: int = 0
        self.written_count: int = 0
        self.tasks: List[Task] = []


def aggregate_window(orders: Iterable[ActiveOrder], dates: List[date]) -> PhaseAggregator:
    """Project every order and fold the occurrences that fall inside ``dates``."""
    aggregator = PhaseAggregator()
    if not dates:
        return aggregator
    start, end = dates[0], dates[-1]
    for order in orders:
        for occ in project_order(order):
            if start <= occ.day <= end:
                aggregator.add(occ)
    return aggregator


def plan_phase_tasks(orders: Iterable[ActiveOrder], start_date: DayLike, num_days: int) -> List[Task]:
    """Compute the generated tasks for a window without touching storage.
    
    Args:
        orders: Non-delivered orders with customer/variety fields resolved
        start_date: First day of the window
        num_days: Window length in days
        
    Returns:
        Summary and detail tasks in day order, then production-phase order
    """
    dates = enumerate_dates(start_date, num_days)
    aggregator = aggregate_window(orders, dates)

    tasks: List[Task] = []
    for day in dates:
        bucket = aggregator.bucket(day)
        if bucket is None:
            continue
        for phase in PHASE_ORDER:
            if not bucket.has_phase(phase):
                continue
            rendered = render_phase(bucket, phase)
            tasks.append(create_generated_task(day, phase, TaskKind.SUMMARY, rendered.summary_title))
            tasks.append(create_generated_task(day, phase, TaskKind.DETAIL, rendered.detail_title))
    return tasks


def sync_phase_tasks_range(db: Session, start_date: DayLike, num_days: int) -> SyncResult:
    """Replace the generated tasks due in [start_date, start_date + num_days - 1].

    Idempotent: running it twice with no order changes leaves the same rows.
    A non-positive ``num_days`` is a no-op.

    Raises:
        PhaseSyncError: if the window is invalid, or deleting, loading or writing
            fails (nothing is committed)
    """
    result = SyncResult()
    try:
        dates = enumerate_dates(start_date, num_days)
    except (ValueError, OverflowError) as e:
        raise PhaseSyncError("window", f"{type(e).__name__}: {str(e)}") from e
    if not dates:
        return result

    result.start_date, result.end_date = dates[0], dates[-1]
    task_repo = TaskRepository(db)
    order_repo = OrderRepository(db)

    stage = "delete"
    try:
        result.deleted_count = task_repo.delete_generated_in_range(result.start_date, result.end_date, commit=False)

        stage = "load"
        orders = order_repo.list_active()

        stage = "write"
        result.tasks = plan_phase_tasks(orders, result.start_date, len(dates))
        result.written_count = task_repo.upsert_generated(result.tasks, commit=False)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(
            f"Phase task sync {result.start_date}..{result.end_date} failed during {stage}: "
            f"{type(e).__name__}: {str(e)}"
        )
        raise PhaseSyncError(stage, f"{type(e).__name__}: {str(e)}") from e

    logger.info(
        f"Synced phase tasks {result.start_date}..{result.end_date}: "
        f"deleted {result.deleted_count}, wrote {result.written_count} from {len(orders)} orders"
    )
    return result


def sync_daily_phase_tasks(db: Session, today: DayLike) -> SyncResult:
    """Sync a single day."""
    return sync_phase_tasks_range(db, today, 1)
