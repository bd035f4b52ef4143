from __future__ import annotations

from .orchestrator import OrchestratorState, SwapOrchestrator
from .randomness import RandomnessManager
from .scheduler import compute_next_deadline
from .selector import NO_SWAP, select_next
from .stats import StatsAggregator

__all__ = [
    "NO_SWAP",
    "OrchestratorState",
    "RandomnessManager",
    "StatsAggregator",
    "SwapOrchestrator",
    "compute_next_deadline",
    "select_next",
]
