"""FastAPI web application for trayplan."""

import os
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from trayplan import __version__
from trayplan.database.database import get_db
from trayplan.database.order_repository import OrderRepository
from trayplan.database.repository import TaskRepository
from trayplan.engine.board import build_day_board
from trayplan.engine.sync import PhaseSyncError, sync_phase_tasks_range
from trayplan.models.constants import MAX_SYNC_DAYS, TASK_BOARD_SYNC_DAYS
from trayplan.models.task import Task, TaskStatus, TaskType
from trayplan.models.task_factory import create_user_task

DEFAULT_SYNC_DAYS = int(os.getenv("PHASE_SYNC_DAYS", str(TASK_BOARD_SYNC_DAYS)))

# Initialize FastAPI app
app = FastAPI(
    title="trayplan API",
    description="Derives soak/sow/spray/lights-on/water/harvest/delivery tasks from microgreens orders",
    version=__version__,
)


# Request/response models
class SyncRequest(BaseModel):
    """Request for a phase-task sync."""
    start_date: Optional[date] = Field(None, description="First day of the window (defaults to today)")
    days: int = Field(DEFAULT_SYNC_DAYS, le=MAX_SYNC_DAYS, description="Window length in days (<= 0 is a no-op)")


class SyncResponse(BaseModel):
    """Response for a phase-task sync."""
    start_date: Optional[date]
    end_date: Optional[date]
    deleted_count: int
    written_count: int


class TaskCreateRequest(BaseModel):
    """Request to create a user-authored task."""
    title: str = Field(..., min_length=1)
    due_date: date
    status: TaskStatus = TaskStatus.PLANNED
    order_id: Optional[str] = None
    task_type: Optional[TaskType] = None


class TaskStatusRequest(BaseModel):
    status: TaskStatus


class BoardItemResponse(BaseModel):
    """One row of a day's board."""
    task: Task
    task_type: TaskType
    title: str
    generated: bool
    detail: Optional[str] = None


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/phase-tasks/sync", response_model=SyncResponse)
def sync_phase_tasks(request: SyncRequest, db: Session = Depends(get_db)):
    """Regenerate phase tasks for a window of days."""
    start = request.start_date or date.today()
    try:
        result = sync_phase_tasks_range(db, start, request.days)
    except PhaseSyncError as e:
        if e.stage == "window":
            raise HTTPException(status_code=400, detail=f"Invalid sync window: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to sync phase tasks: {str(e)}")
    return SyncResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        deleted_count=result.deleted_count,
        written_count=result.written_count,
    )


@app.get("/tasks", response_model=List[Task])
def list_tasks(start: Optional[date] = None, end: Optional[date] = None, db: Session = Depends(get_db)):
    """List tasks ordered by due date, optionally limited to [start, end]."""
    repo = TaskRepository(db)
    if start is None and end is None:
        return repo.get_all()
    return repo.get_in_range(start or date.min, end or date.max)


@app.post("/tasks", response_model=Task, status_code=201)
def create_task(request: TaskCreateRequest, db: Session = Depends(get_db)):
    """Create a user-authored task."""
    if not request.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    task = create_user_task(
        title=request.title,
        due_date=request.due_date,
        status=request.status,
        order_id=request.order_id,
        task_type=request.task_type,
    )
    return TaskRepository(db).create(task)


@app.patch("/tasks/{task_id}/status", response_model=Task)
def update_task_status(task_id: str, request: TaskStatusRequest, db: Session = Depends(get_db)):
    """Change a task's status."""
    updated = TaskRepository(db).update_status(task_id, request.status)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return updated


@app.get("/board/{day}", response_model=List[BoardItemResponse])
def day_board(day: date, db: Session = Depends(get_db)):
    """Board rows for one day (generated summaries with their breakdown, plus user tasks)."""
    tasks = TaskRepository(db).get_in_range(day, day)
    return [
        BoardItemResponse(
            task=item.task,
            task_type=item.task_type,
            title=item.title,
            generated=item.generated,
            detail=item.detail,
        )
        for item in build_day_board(tasks, day)
    ]


@app.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    """Delete an order and every task that references it."""
    if not OrderRepository(db).delete(order_id):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return None


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
