from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from .config import ShufflerConfig
from .engine import RandomnessManager, SwapOrchestrator
from .host import Host
from .logger import EventLogger, setup_logging
from .schemas import SessionState, Settings, WorkloadStats
from .session_store import load_session, load_workload_stats
from .settings import load_settings

logger = logging.getLogger(__name__)


def open_session(
    cfg: ShufflerConfig,
    host: Host,
    clock: Optional[Callable[[], float]] = None,
    configure_logging: bool = True,
) -> SwapOrchestrator:
    """
    Load settings and session state, then start the engine.

    Startup order:
      1) settings (file overrides defaults)
      2) session (persisted or fresh)
      3) seed + first deadline, initial ROM if the host has none
    """
    settings = load_settings(cfg.settings_path)
    if configure_logging:
        setup_logging(settings.log_level)
    logger.debug("Script starting...")

    events = EventLogger(log_path=cfg.events_path)
    events.log("settings", "loaded", settings.to_record())

    session = load_session(cfg)
    events.log("session", "loaded", {
        "session_kind": session.session_kind,
        "current": session.current_workload_file,
        "total_swaps": session.total_swap_count,
    })

    orchestrator = SwapOrchestrator(
        cfg=cfg,
        settings=settings,
        session=session,
        host=host,
        events=events,
        randomness=RandomnessManager(clock=clock),
        clock=clock,
    )
    orchestrator.start()
    return orchestrator


def read_stats(cfg: ShufflerConfig) -> Tuple[SessionState, Dict[str, WorkloadStats]]:
    session = load_session(cfg)
    workloads: Dict[str, WorkloadStats] = {}
    if cfg.workload_stats_path.exists():
        for path in sorted(cfg.workload_stats_path.glob("*.txt")):
            filename = path.name[: -len(".txt")]
            workloads[filename] = load_workload_stats(cfg, filename)
    return session, workloads


def effective_settings(cfg: ShufflerConfig) -> Settings:
    return load_settings(cfg.settings_path)
