"""Repository for Order database operations."""

import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from trayplan.models.order import ActiveOrder, Order, OrderStatus
from trayplan.database.models import CustomerDB, OrderDB, VarietyDB, enum_to_value
from trayplan.database.repository import TaskRepository

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for Order database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, order: Order) -> Order:
        """Create a new order."""
        try:
            order_db = OrderDB.from_pydantic(order)
            self.db.add(order_db)
            self.db.commit()
            self.db.refresh(order_db)
            logger.debug(f"Created order {order.id}")
            return order_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create order {order.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, order_id: str) -> Optional[Order]:
        """Get order by ID."""
        row = self.db.query(OrderDB).filter(OrderDB.id == order_id).first()
        return row.to_pydantic() if row else None

    def list_active(self) -> List[ActiveOrder]:
        """Every non-delivered order joined with its customer and variety.

        Outer joins keep orders whose customer or variety row is missing; those
        fall back to placeholder names and zero growth parameters.
        """
        rows = (
            self.db.query(
                OrderDB,
                CustomerDB.name,
                VarietyDB.name,
                VarietyDB.soak_hours,
                VarietyDB.blackout_days,
                VarietyDB.harvest_days,
            )
            .outerjoin(CustomerDB, CustomerDB.id == OrderDB.customer_id)
            .outerjoin(VarietyDB, VarietyDB.id == OrderDB.variety_id)
            .filter(func.lower(OrderDB.status) != OrderStatus.DELIVERED.value)
            .order_by(OrderDB.delivery_date, OrderDB.id)
            .all()
        )
        return [
            ActiveOrder(
                id=order.id,
                customer_id=order.customer_id,
                customer_name=customer_name,
                variety_id=order.variety_id,
                variety_name=variety_name,
                quantity=order.quantity,
                delivery_date=order.delivery_date,
                status=order.status,
                soak_hours=soak_hours,
                blackout_days=blackout_days,
                harvest_days=harvest_days,
            )
            for order, customer_name, variety_name, soak_hours, blackout_days, harvest_days in rows
        ]

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Advance an order's status."""
        row = self.db.query(OrderDB).filter(OrderDB.id == order_id).first()
        if row is None:
            return None
        try:
            row.status = enum_to_value(status)
            self.db.commit()
            self.db.refresh(row)
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to set status={status} for order {order_id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, order_id: str) -> bool:
        """Delete an order together with every task that references it."""
        row = self.db.query(OrderDB).filter(OrderDB.id == order_id).first()
        if row is None:
            return False
        try:
            task_count = TaskRepository(self.db).delete_for_orders([order_id], commit=False)
            self.db.delete(row)
            self.db.commit()
            logger.debug(f"Deleted order {order_id} and {task_count} referencing tasks")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete order {order_id}: {type(e).__name__}: {str(e)}")
            raise
