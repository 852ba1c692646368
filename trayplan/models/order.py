"""Order, customer and variety data models for trayplan."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from trayplan.models.constants import DEFAULT_CUSTOMER_NAME, DEFAULT_VARIETY_NAME


class OrderStatus(str, Enum):
    """Order status enumeration (delivered is terminal for scheduling)."""
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    PACKED = "packed"
    DELIVERED = "delivered"


def coerce_number(value, cast=int):
    """Coerce a loosely-typed numeric field, treating missing or garbage as 0.

    Source rows are entered by hand and frequently leave growth parameters blank,
    so blanks count as "no such step" rather than an error.
    """
    if value is None or value == "":
        return cast(0)
    try:
        return cast(float(value)) if cast is int else cast(value)
    except (TypeError, ValueError, OverflowError):
        return cast(0)


def coerce_status(value) -> OrderStatus:
    """Lowercase a free-text order status, falling back to draft."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value or "").strip().lower())
    except ValueError:
        return OrderStatus.DRAFT


class Order(BaseModel):
    """A customer's commitment to receive N trays of one variety on one day."""

    id: str = Field(..., description="Order identifier")
    customer_id: str = Field(..., description="Customer ID")
    variety_id: str = Field(..., description="Variety ID")
    quantity: int = Field(..., gt=0, description="Trays ordered")
    delivery_date: date = Field(..., description="Delivery calendar day")
    status: OrderStatus = Field(OrderStatus.DRAFT, description="Order status")
    created_at: Optional[datetime] = Field(None, description="Order creation timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class ActiveOrder(BaseModel):
    """Non-delivered order joined with its customer and variety.

    Numeric growth parameters are coerced leniently (missing -> 0).
    """

    id: str
    customer_id: Optional[str] = None
    customer_name: str = DEFAULT_CUSTOMER_NAME
    variety_id: Optional[str] = None
    variety_name: str = DEFAULT_VARIETY_NAME
    quantity: int = 0
    delivery_date: date
    status: OrderStatus = OrderStatus.DRAFT
    soak_hours: float = 0.0
    blackout_days: int = 0
    harvest_days: int = 0

    @field_validator("quantity", "blackout_days", "harvest_days", mode="before")
    @classmethod
    def _coerce_int(cls, v):
        return coerce_number(v, int)

    @field_validator("soak_hours", mode="before")
    @classmethod
    def _coerce_float(cls, v):
        return coerce_number(v, float)

    @field_validator("customer_name", mode="before")
    @classmethod
    def _default_customer_name(cls, v):
        return v or DEFAULT_CUSTOMER_NAME

    @field_validator("variety_name", mode="before")
    @classmethod
    def _default_variety_name(cls, v):
        return v or DEFAULT_VARIETY_NAME

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        """Case-insensitive; unknown or missing statuses read as draft."""
        return coerce_status(v)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
