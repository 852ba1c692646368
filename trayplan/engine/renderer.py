"""Render aggregated buckets into generated task titles.

Titles are consumed verbatim by existing readers, so the marker prefixes and
separators are fixed.
"""

from typing import Dict, Hashable, List, NamedTuple, Tuple

from trayplan.engine.aggregator import DayBucket, GroupKey
from trayplan.models.constants import (
    DELIVERY_BULLET,
    DETAIL_SEPARATOR,
    DETAIL_TITLE_PREFIX,
    ITEM_SEPARATOR,
    SUMMARY_TITLE_PREFIX,
)
from trayplan.models.phase import Phase, phase_label


class RenderedPhase(NamedTuple):
    summary_title: str
    detail_title: str


def entry_label(key: Hashable) -> str:
    if isinstance(key, GroupKey):
        return key.label
    return str(key)


def sorted_entries(counts: Dict[Hashable, int]) -> List[Tuple[str, int]]:
    """(label, qty) pairs by descending quantity, then ascending label.

    The raw key is the last tiebreaker so distinct keys that render to the same
    label still order deterministically.
    """
    keyed = [(entry_label(k), qty, k if isinstance(k, tuple) else (k,)) for k, qty in counts.items()]
    keyed.sort(key=lambda item: (-item[1], item[0], item[2]))
    return [(label, qty) for label, qty, _ in keyed]


def render_summary_title(phase: Phase) -> str:
    """``SYS:<label>``; the summary carries no quantity text."""
    return f"{SUMMARY_TITLE_PREFIX}{phase_label(phase)}"


def render_detail_text(bucket: DayBucket, phase: Phase) -> str:
    """Breakdown text for one (day, phase) bucket.

    Grow phases: ``Pea → Cafe B x5, Pea → Farm C x3``
    Deliveries: ``Cafe B — 5 trays (Pea x5) • Farm C — 3 trays (Pea x3)``
    """
    phase = Phase(phase)
    counts = bucket.detail.get(phase, {})

    if phase != Phase.DELIVER:
        return ITEM_SEPARATOR.join(f"{label} x{qty}" for label, qty in sorted_entries(counts))

    parts: List[str] = []
    for customer, qty in sorted_entries(counts):
        breakdown = bucket.deliver_breakdown.get(customer) or {}
        varieties = ITEM_SEPARATOR.join(f"{name} x{q}" for name, q in sorted_entries(breakdown))
        line = f"{customer}{DETAIL_SEPARATOR}{qty} trays"
        if varieties:
            line += f" ({varieties})"
        parts.append(line)
    return DELIVERY_BULLET.join(parts)


def render_detail_title(bucket: DayBucket, phase: Phase) -> str:
    """``SYS:DETAIL:<label> — <breakdown>``"""
    return f"{DETAIL_TITLE_PREFIX}{phase_label(phase)}{DETAIL_SEPARATOR}{render_detail_text(bucket, phase)}"


def render_phase(bucket: DayBucket, phase: Phase) -> RenderedPhase:
    return RenderedPhase(render_summary_title(phase), render_detail_title(bucket, phase))
