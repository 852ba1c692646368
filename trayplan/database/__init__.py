"""Database layer for trayplan."""
