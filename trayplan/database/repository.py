"""Repository layer for task database operations."""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from trayplan.models.task import Task, TaskSource, TaskStatus
from trayplan.database.models import TaskDB, enum_to_value

logger = logging.getLogger(__name__)

# Rows per multi-VALUES upsert statement (keeps SQLite under its bound-parameter limit)
UPSERT_CHUNK_SIZE = 50

# Columns overwritten when a generated row already exists for its generator key
_UPSERT_UPDATE_COLUMNS = ("title", "due_date", "status", "task_type", "phase", "kind", "order_id", "updated_at")


class TaskRepository:
    """Repository for Task database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise
    
    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_by_generator_key(self, generator_key: str) -> Optional[Task]:
        """Get a generated task by its generator key."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.source == TaskSource.GENERATED.value,
            TaskDB.generator_key == generator_key,
        ).first()
        return task_db.to_pydantic() if task_db else None
    
    def get_all(self) -> List[Task]:
        """Get all tasks sorted by due date."""
        tasks_db = self.db.query(TaskDB).order_by(TaskDB.due_date, TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_in_range(self, start: date, end: date, source: Optional[TaskSource] = None) -> List[Task]:
        """Get tasks whose due date lies in [start, end], optionally filtered by source."""
        query = self.db.query(TaskDB).filter(TaskDB.due_date >= start, TaskDB.due_date <= end)
        if source is not None:
            query = query.filter(TaskDB.source == enum_to_value(source))
        tasks_db = query.order_by(TaskDB.due_date, TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        """Change a task's status."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if task_db is None:
            return None
        try:
            task_db.status = enum_to_value(status)
            task_db.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Set status={task_db.status} for task {task_id}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update status for task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def delete_generated_in_range(self, start: date, end: date, *, commit: bool = True) -> int:
        """Delete generated tasks due within [start, end].

        User-authored tasks are never touched.

        Returns:
            Number of tasks deleted
        """
        try:
            deleted_count = (
                self.db.query(TaskDB)
                .filter(
                    TaskDB.source == TaskSource.GENERATED.value,
                    TaskDB.due_date >= start,
                    TaskDB.due_date <= end,
                )
                .delete(synchronize_session=False)
            )
            if commit:
                self.db.commit()
            logger.debug(f"Deleted {deleted_count} generated tasks due {start}..{end}")
            return int(deleted_count)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete generated tasks due {start}..{end}: {type(e).__name__}: {str(e)}")
            raise

    def upsert_generated(self, tasks: List[Task], *, commit: bool = True) -> int:
        """Insert generated tasks, overwriting any row with the same (source, generator_key).

        Returns:
            Number of rows written
        """
        if not tasks:
            return 0
        try:
            rows = [TaskDB.row_values(task) for task in tasks]
            dialect = self._dialect_name()
            if dialect in ("postgresql", "sqlite"):
                for i in range(0, len(rows), UPSERT_CHUNK_SIZE):
                    self.db.execute(self._upsert_statement(dialect, rows[i:i + UPSERT_CHUNK_SIZE]))
                self.db.expire_all()
            else:
                self._merge_rows(rows)
            if commit:
                self.db.commit()
            logger.debug(f"Upserted {len(rows)} generated tasks")
            return len(rows)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to upsert generated tasks: {type(e).__name__}: {str(e)}")
            raise

    def _dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    def _upsert_statement(self, dialect: str, rows: List[dict]):
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert
        stmt = insert(TaskDB.__table__).values(rows)
        return stmt.on_conflict_do_update(
            index_elements=["source", "generator_key"],
            set_={col: getattr(stmt.excluded, col) for col in _UPSERT_UPDATE_COLUMNS},
        )

    def _merge_rows(self, rows: List[dict]) -> None:
        """Portable fallback for dialects without ON CONFLICT support."""
        for row in rows:
            existing = self.db.query(TaskDB).filter(
                TaskDB.source == row["source"],
                TaskDB.generator_key == row["generator_key"],
            ).first()
            if existing is None:
                self.db.add(TaskDB(**row))
                continue
            for col in _UPSERT_UPDATE_COLUMNS:
                setattr(existing, col, row[col])
        self.db.flush()

    def delete_for_orders(self, order_ids: List[str], *, commit: bool = True) -> int:
        """Delete tasks that reference any of the given orders."""
        if not order_ids:
            return 0
        try:
            deleted_count = (
                self.db.query(TaskDB)
                .filter(TaskDB.order_id.in_(order_ids))
                .delete(synchronize_session=False)
            )
            if commit:
                self.db.commit()
            logger.debug(f"Deleted {deleted_count} tasks for {len(order_ids)} orders")
            return int(deleted_count)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete tasks for orders: {type(e).__name__}: {str(e)}")
            raise
