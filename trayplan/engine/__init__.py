"""Phase-task derivation engine for trayplan."""

from trayplan.engine.dates import add_days, subtract_days, enumerate_dates, parse_day, format_day
from trayplan.engine.projector import Occurrence, project_order, growth_dates
from trayplan.engine.aggregator import GroupKey, DayBucket, PhaseAggregator
from trayplan.engine.renderer import render_summary_title, render_detail_title, render_detail_text, sorted_entries
from trayplan.engine.sync import (
    PhaseSyncError,
    SyncResult,
    aggregate_window,
    plan_phase_tasks,
    sync_phase_tasks_range,
    sync_daily_phase_tasks,
)

__all__ = [
    "add_days",
    "subtract_days",
    "enumerate_dates",
    "parse_day",
    "format_day",
    "Occurrence",
    "project_order",
    "growth_dates",
    "GroupKey",
    "DayBucket",
    "PhaseAggregator",
    "render_summary_title",
    "render_detail_title",
    "render_detail_text",
    "sorted_entries",
    "PhaseSyncError",
    "SyncResult",
    "aggregate_window",
    "plan_phase_tasks",
    "sync_phase_tasks_range",
    "sync_daily_phase_tasks",
]
