"""SQLAlchemy database models for trayplan."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, ForeignKey, UniqueConstraint

from typing import Optional, Union, TypeVar, Type
from trayplan.database.database import Base
from trayplan.models.order import OrderStatus
from trayplan.models.task import Phase, TaskStatus, TaskType, TaskSource, TaskKind

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T, None]) -> Optional[str]:
    """Convert enum to string value (handles enum, string and None).
    
    Args:
        enum_obj: Enum instance, string value, or None
        
    Returns:
        String value of the enum, the string itself, or None
    """
    if enum_obj is None:
        return None
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: Optional[str], enum_class: Type[T], default: Optional[T]) -> Optional[T]:
    """Convert string to enum with fallback to default.
    
    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default value if conversion fails
        
    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class CustomerDB(Base):
    """Database model for Customer."""

    __tablename__ = "customers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class VarietyDB(Base):
    """Database model for Variety (growth profile).

    Growth parameters are nullable; readers treat NULL as 0.
    """

    __tablename__ = "varieties"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    harvest_days = Column(Integer, nullable=True)
    blackout_days = Column(Integer, nullable=True)
    soak_hours = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class OrderDB(Base):
    """Database model for Order."""

    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id = Column(String, ForeignKey("customers.id"), nullable=False, index=True)
    variety_id = Column(String, ForeignKey("varieties.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    delivery_date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False, default=OrderStatus.DRAFT.value, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from trayplan.models.order import Order
        return Order(
            id=self.id,
            customer_id=self.customer_id,
            variety_id=self.variety_id,
            quantity=self.quantity,
            delivery_date=self.delivery_date,
            status=value_to_enum(self.status, OrderStatus, OrderStatus.DRAFT),
            created_at=self.created_at,
        )

    @classmethod
    def from_pydantic(cls, order):
        """Create database model from Pydantic model."""
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            variety_id=order.variety_id,
            quantity=order.quantity,
            delivery_date=order.delivery_date,
            status=enum_to_value(order.status),
            created_at=order.created_at or datetime.utcnow(),
        )


class TaskDB(Base):
    """Database model for Task."""
    
    __tablename__ = "tasks"
    __table_args__ = (
        # Upsert conflict target for generated tasks.
        # Note: NULL generator keys do not participate (user tasks are unaffected).
        UniqueConstraint("source", "generator_key", name="uq_task_source_generator_key"),
    )
    
    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # Basic fields
    title = Column(String, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False, default=TaskStatus.PLANNED.value)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=True, index=True)
    
    # Classification
    task_type = Column(String, nullable=True)
    source = Column(String, nullable=True, index=True)
    phase = Column(String, nullable=True)
    kind = Column(String, nullable=True)
    generator_key = Column(String, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from trayplan.models.task import Task
        return Task(
            id=self.id,
            title=self.title,
            due_date=self.due_date,
            status=value_to_enum(self.status, TaskStatus, TaskStatus.PLANNED),
            order_id=self.order_id,
            task_type=value_to_enum(self.task_type, TaskType, None),
            source=value_to_enum(self.source, TaskSource, None),
            phase=value_to_enum(self.phase, Phase, None),
            kind=value_to_enum(self.kind, TaskKind, None),
            generator_key=self.generator_key,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
    
    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            title=task.title,
            due_date=task.due_date,
            status=enum_to_value(task.status),
            order_id=task.order_id,
            task_type=enum_to_value(task.task_type),
            source=enum_to_value(task.source),
            phase=enum_to_value(task.phase),
            kind=enum_to_value(task.kind),
            generator_key=task.generator_key,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    @staticmethod
    def row_values(task) -> dict:
        """Column values for a Core insert of a pydantic Task."""
        return {
            "id": task.id,
            "title": task.title,
            "due_date": task.due_date,
            "status": enum_to_value(task.status),
            "order_id": task.order_id,
            "task_type": enum_to_value(task.task_type),
            "source": enum_to_value(task.source),
            "phase": enum_to_value(task.phase),
            "kind": enum_to_value(task.kind),
            "generator_key": task.generator_key,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
        }
