"""HTTP API for trayplan."""
