from __future__ import annotations

import logging
from pathlib import Path

from .config import ShufflerConfig
from .schemas import SessionState, WorkloadStats
from .store import kvstore

logger = logging.getLogger(__name__)


def ensure_dirs(cfg: ShufflerConfig) -> None:
    for path in (cfg.workloads_path, cfg.saves_path, cfg.stats_path, cfg.workload_stats_path):
        if not path.exists():
            logger.info("Missing path, creating it: %s", path)
            path.mkdir(parents=True, exist_ok=True)


def workload_stats_file(cfg: ShufflerConfig, filename: str) -> Path:
    return cfg.workload_stats_path / f"{filename}.txt"


def savestate_file(cfg: ShufflerConfig, filename: str) -> Path:
    return cfg.saves_path / f"{filename}.save"


def load_session(cfg: ShufflerConfig) -> SessionState:
    """
    Load the persisted session, or a fresh one when none exists.

    Whatever is on disk is taken as-is; a crash mid-swap can leave any mix of
    old and new values and callers re-derive what they need from it.
    """
    data = kvstore.load(cfg.session_path)
    if data is None:
        logger.warning("No session data found. Fresh start.")
        return SessionState()

    session, rejected = SessionState().overlay(data)
    for key in rejected:
        logger.warning("Ignoring invalid session value %s: %r", key, data[key])
    logger.debug("Finished session load")
    return session


def save_session(cfg: ShufflerConfig, session: SessionState) -> None:
    kvstore.save(cfg.session_path, session.to_record())


def load_workload_stats(cfg: ShufflerConfig, filename: str) -> WorkloadStats:
    """Load a workload's stats, creating default ones on first play."""
    data = kvstore.load(workload_stats_file(cfg, filename))
    if data is None:
        return WorkloadStats()
    stats, rejected = WorkloadStats().overlay(data)
    for key in rejected:
        logger.warning("Ignoring invalid stats value %s for %s: %r", key, filename, data[key])
    return stats


def save_workload_stats(cfg: ShufflerConfig, filename: str, stats: WorkloadStats) -> None:
    kvstore.save(workload_stats_file(cfg, filename), stats.to_record())
