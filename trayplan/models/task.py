"""Task data model for trayplan."""

from datetime import date, datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    """Task status enumeration."""
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    DELIVERED = "delivered"
    DONE = "done"


class TaskType(str, Enum):
    """Coarse task classification read by the task board and calendar."""
    SOAK = "soak"
    SOW = "sow"
    SPRAY = "spray"
    BLACKOUT = "blackout"
    LIGHTS_ON = "lights_on"
    WATER = "water"
    HARVEST = "harvest"
    DELIVERY = "delivery"
    OTHER = "other"


class TaskSource(str, Enum):
    """Who authored the task."""
    GENERATED = "generated"
    MANUAL = "manual"


class TaskKind(str, Enum):
    """Generated task kind (one of each per non-empty day/phase bucket)."""
    SUMMARY = "summary"
    DETAIL = "detail"


class Phase(str, Enum):
    """Production phase enumeration (declared in production order)."""
    SOAK = "soak"
    SOW = "sow"
    SPRAY = "spray"          # blackout period, trays stacked
    LIGHTS_ON = "lights_on"
    WATER = "water"          # lights-on period through harvest
    HARVEST = "harvest"
    DELIVER = "deliver"


class Task(BaseModel):
    """Canonical Task model (user-authored or generated)."""
    
    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title (derived rendering for generated tasks)")
    due_date: date = Field(..., description="Calendar day the task is due")
    status: TaskStatus = Field(TaskStatus.PLANNED, description="Task status")
    order_id: Optional[str] = Field(None, description="Order this task belongs to (user tasks only)")
    task_type: Optional[TaskType] = Field(None, description="Coarse task type")
    source: Optional[TaskSource] = Field(None, description="Task source (generated tasks are owned by the synchronizer)")
    phase: Optional[Phase] = Field(None, description="Production phase for generated tasks")
    kind: Optional[TaskKind] = Field(None, description="summary/detail for generated tasks")
    generator_key: Optional[str] = Field(None, description="Idempotency key for generated tasks")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
