"""Aggregation of phase occurrences into per-day, per-phase buckets.

Two parallel structures are kept for every day:

- summary: phase -> label -> trays, where the label is the variety name
  (the customer name for deliveries)
- detail: phase -> key -> trays, where the key is a (variety, customer) pair
  (the customer name for deliveries, with a customer -> variety breakdown kept
  alongside)

Quantities for a repeated label always add.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Hashable, Iterable, List, NamedTuple, Optional

from trayplan.engine.projector import Occurrence
from trayplan.models.constants import PAIR_ARROW
from trayplan.models.phase import Phase


class GroupKey(NamedTuple):
    """Composite (variety, customer) detail key.

    Kept as a tuple so names containing the rendered arrow cannot collide.
    """
    variety: str
    customer: str

    @property
    def label(self) -> str:
        return f"{self.variety}{PAIR_ARROW}{self.customer}"


def add_quantity(counts: Dict[Hashable, int], key: Hashable, qty: int) -> None:
    counts[key] = counts.get(key, 0) + int(qty or 0)


class DayBucket:
    """Summary and detail maps for a single day."""

    def __init__(self, day: date):
        self.day = day
        self.summary: Dict[Phase, Dict[str, int]] = defaultdict(dict)
        self.detail: Dict[Phase, Dict[Hashable, int]] = defaultdict(dict)
        self.deliver_breakdown: Dict[str, Dict[str, int]] = defaultdict(dict)

    def add(self, occ: Occurrence) -> None:
        """Fold one occurrence into this day's maps."""
        phase = Phase(occ.phase)
        if phase == Phase.DELIVER:
            add_quantity(self.summary[phase], occ.customer, occ.quantity)
            add_quantity(self.detail[phase], occ.customer, occ.quantity)
            add_quantity(self.deliver_breakdown[occ.customer], occ.variety, occ.quantity)
            return
        add_quantity(self.summary[phase], occ.variety, occ.quantity)
        add_quantity(self.detail[phase], GroupKey(occ.variety, occ.customer), occ.quantity)

    def total(self, phase: Phase) -> int:
        """Total trays for a phase on this day."""
        return sum(self.summary.get(Phase(phase), {}).values())

    def has_phase(self, phase: Phase) -> bool:
        """True when the phase has a non-zero quantity on this day."""
        return self.total(phase) > 0


class PhaseAggregator:
    """Accumulates occurrences for many orders, keyed by day."""

    def __init__(self):
        self.days: Dict[date, DayBucket] = {}

    def ensure_day(self, day: date) -> DayBucket:
        bucket = self.days.get(day)
        if bucket is None:
            bucket = DayBucket(day)
            self.days[day] = bucket
        return bucket

    def add(self, occ: Occurrence) -> None:
        self.ensure_day(occ.day).add(occ)

    def add_all(self, occurrences: Iterable[Occurrence]) -> None:
        for occ in occurrences:
            self.add(occ)

    def bucket(self, day: date) -> Optional[DayBucket]:
        """Bucket for a day, or None if nothing happens that day."""
        return self.days.get(day)

    def sorted_days(self) -> List[date]:
        return sorted(self.days)
