"""trayplan: microgreens production planner (phase-task derivation and sync)."""

__version__ = "0.1.0"
