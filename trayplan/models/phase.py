"""Production phase model for trayplan.

Phases form a closed, totally ordered vocabulary. Each phase maps to exactly one
coarser task type used by the task board, calendar and dashboard.
"""

from typing import Dict, List

from trayplan.models.task import Phase, TaskType


PHASE_ORDER: List[Phase] = [
    Phase.SOAK,
    Phase.SOW,
    Phase.SPRAY,
    Phase.LIGHTS_ON,
    Phase.WATER,
    Phase.HARVEST,
    Phase.DELIVER,
]

# Rendered into generated task titles; existing readers match on these literals.
PHASE_LABELS: Dict[Phase, str] = {
    Phase.SOAK: "Soak (12h)",
    Phase.SOW: "Sow + Stack (Blackout)",
    Phase.SPRAY: "Spray (Blackout) — AM/PM as needed",
    Phase.LIGHTS_ON: "Lights On (Unstack + First Water)",
    Phase.WATER: "Water (Lights On) — AM/PM as needed",
    Phase.HARVEST: "Harvest",
    Phase.DELIVER: "Deliver",
}

_PHASE_TASK_TYPES: Dict[Phase, TaskType] = {
    Phase.SOAK: TaskType.SOAK,
    Phase.SOW: TaskType.SOW,
    Phase.SPRAY: TaskType.SPRAY,
    Phase.LIGHTS_ON: TaskType.LIGHTS_ON,
    Phase.WATER: TaskType.WATER,
    Phase.HARVEST: TaskType.HARVEST,
    Phase.DELIVER: TaskType.DELIVERY,
}


def phase_label(phase: Phase) -> str:
    """Human label for a phase."""
    return PHASE_LABELS[Phase(phase)]


def task_type_for_phase(phase: Phase) -> TaskType:
    """Map a phase to its task type (deliver -> delivery, all others 1:1)."""
    return _PHASE_TASK_TYPES[Phase(phase)]


def phase_sort_index(phase: Phase) -> int:
    """Position of a phase in production order."""
    return PHASE_ORDER.index(Phase(phase))
