"""Order projector: derive production-phase occurrences from one order.

The projector is window-agnostic. Callers discard occurrences that fall outside
the window they care about.
"""

import logging
from datetime import date
from typing import List, NamedTuple

from trayplan.engine.dates import add_days, subtract_days
from trayplan.models.order import ActiveOrder, OrderStatus
from trayplan.models.phase import Phase

logger = logging.getLogger(__name__)


class Occurrence(NamedTuple):
    """One (day, phase) event contributed by an order."""
    day: date
    phase: Phase
    quantity: int
    variety: str
    customer: str
    order_id: str


class GrowthDates(NamedTuple):
    """Key dates of an order's grow cycle."""
    sow: date
    lights_on: date
    harvest: date
    delivery: date


def growth_dates(order: ActiveOrder) -> GrowthDates:
    """Compute sow, lights-on, harvest and delivery days for an order.

    - sow = delivery - harvest_days (delivery itself when harvest_days is 0)
    - harvest = delivery - 1 (cut and pack the day before delivery)
    - lights_on = sow + blackout_days (sow itself when blackout_days is 0)
    """
    delivery = order.delivery_date
    sow = subtract_days(delivery, order.harvest_days) if order.harvest_days > 0 else delivery
    harvest = subtract_days(delivery, 1)
    lights_on = add_days(sow, order.blackout_days) if order.blackout_days > 0 else sow
    return GrowthDates(sow=sow, lights_on=lights_on, harvest=harvest, delivery=delivery)


def project_order(order: ActiveOrder) -> List[Occurrence]:
    """Project an order into its phase occurrences.

    Delivered orders contribute nothing. Packed orders only contribute their
    delivery (growing is already done). Orders with a non-positive quantity
    contribute nothing.
    """
    if order.status == OrderStatus.DELIVERED:
        return []
    qty = order.quantity
    if qty <= 0:
        logger.debug(f"Skipping order {order.id} with non-positive quantity {qty}")
        return []

    dates = growth_dates(order)
    out: List[Occurrence] = []

    def emit(day: date, phase: Phase) -> None:
        out.append(Occurrence(day, phase, qty, order.variety_name, order.customer_name, order.id))

    if order.status != OrderStatus.PACKED:
        if order.soak_hours > 0:
            emit(dates.sow, Phase.SOAK)

        emit(dates.sow, Phase.SOW)

        # Blackout spans [sow, sow + blackout_days - 1]
        for offset in range(max(0, order.blackout_days)):
            emit(add_days(dates.sow, offset), Phase.SPRAY)

        if dates.lights_on <= dates.harvest:
            emit(dates.lights_on, Phase.LIGHTS_ON)

        # Empty when lights-on falls after harvest
        for offset in range((dates.harvest - dates.lights_on).days + 1):
            emit(add_days(dates.lights_on, offset), Phase.WATER)

        emit(dates.harvest, Phase.HARVEST)

    emit(dates.delivery, Phase.DELIVER)
    return out
