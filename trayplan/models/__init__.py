"""Data models for trayplan."""

from trayplan.models.task import Task, TaskStatus, TaskType, TaskSource, TaskKind
from trayplan.models.phase import Phase, PHASE_ORDER, phase_label, task_type_for_phase
from trayplan.models.order import OrderStatus, Order, ActiveOrder

__all__ = [
    "Task",
    "TaskStatus",
    "TaskType",
    "TaskSource",
    "TaskKind",
    "Phase",
    "PHASE_ORDER",
    "phase_label",
    "task_type_for_phase",
    "OrderStatus",
    "Order",
    "ActiveOrder",
]
