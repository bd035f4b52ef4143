from __future__ import annotations

import logging

from ..config import ShufflerConfig
from ..schemas import FRESH_SESSION, RunCounters, SessionState, WorkloadStats
from ..session_store import load_workload_stats, save_session, save_workload_stats

logger = logging.getLogger(__name__)


class StatsAggregator:
    """
    Accumulate-and-persist for per-workload and session counters.

    Per-workload stats are mirrored in the session while a workload is
    active (`swap_count`, `activation_count`, ...), so a flush is the
    mirror plus whatever the outgoing run added. Nothing is retried; a write
    failure surfaces as PersistenceError.
    """

    def __init__(self, cfg: ShufflerConfig):
        self.cfg = cfg

    def load_into_session(self, filename: str, session: SessionState) -> WorkloadStats:
        stats = load_workload_stats(self.cfg, filename)
        session.swap_count = stats.swap_count
        session.activation_count = stats.activation_count
        session.tick_count = stats.tick_count
        session.play_time_seconds = stats.play_time_seconds
        return stats

    def flush_workload_stats(self, filename: str, session: SessionState, run: RunCounters) -> WorkloadStats:
        logger.debug("Updating ROM stats for: %s", filename)
        stats = WorkloadStats(
            swap_count=session.swap_count + 1,
            activation_count=session.activation_count + 1,
            tick_count=session.tick_count + run.ticks,
            play_time_seconds=session.play_time_seconds + run.elapsed_seconds,
            workload_name=session.current_workload_name,
            platform_id=session.current_platform_id,
        )
        save_workload_stats(self.cfg, filename, stats)
        return stats

    def flush_session_stats(
        self,
        session: SessionState,
        run: RunCounters,
        outgoing_name: str,
        outgoing_file: str,
    ) -> None:
        session.total_swap_count += 1
        session.total_activation_count += 1
        session.total_tick_count += run.ticks
        session.total_play_time_seconds += run.elapsed_seconds
        session.last_workload_name = outgoing_name
        session.last_workload_file = outgoing_file
        # every run after the first swap resumes the seed chain
        session.session_kind = max(session.session_kind, FRESH_SESSION) + 1
        save_session(self.cfg, session)
