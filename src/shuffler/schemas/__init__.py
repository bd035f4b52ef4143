from __future__ import annotations

from .core import (
    FRESH_SESSION,
    Record,
    RunCounters,
    SeedMode,
    SessionState,
    Settings,
    WorkloadStats,
)

__all__ = [
    "FRESH_SESSION",
    "Record",
    "RunCounters",
    "SeedMode",
    "SessionState",
    "Settings",
    "WorkloadStats",
]
