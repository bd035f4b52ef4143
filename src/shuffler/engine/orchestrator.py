from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..config import ShufflerConfig
from ..host import Host, list_pool
from ..logger import EventLogger
from ..schemas import RunCounters, SessionState, Settings
from ..session_store import ensure_dirs, savestate_file
from ..utils.ui import countdown_banner
from .randomness import RandomnessManager
from .scheduler import compute_next_deadline
from .selector import NO_SWAP, select_next
from .stats import StatsAggregator

logger = logging.getLogger(__name__)


class OrchestratorState(str, Enum):
    IDLE = "idle"
    SWAPPING = "swapping"


class SwapOrchestrator:
    """
    Drives one shuffling session from the host's per-frame callback.

    Lifecycle:
      start()  -> re-entry point after a process start; re-derives seed and
                  deadline from whatever session state was persisted
      tick()   -> once per host frame; swaps when the deadline is reached
      swap()   -> select, flush outgoing stats, switch ROM, flush session,
                  begin the next run

    Only the swap writes the session file, and it does so before the next
    run is seeded, so restarting after a swap replays the same seed and
    deadline.
    """

    def __init__(
        self,
        cfg: ShufflerConfig,
        settings: Settings,
        session: SessionState,
        host: Host,
        events: EventLogger,
        randomness: Optional[RandomnessManager] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.cfg = cfg
        self.settings = settings
        self.session = session
        self.host = host
        self.events = events
        self.randomness = randomness or RandomnessManager()
        self.stats = StatsAggregator(cfg)
        self.state = OrchestratorState.IDLE
        self._clock = clock or time.time
        self._run_started = self._clock()
        # pool size of the last skip already recorded, so a one-ROM pool
        # past its deadline doesn't log on every frame
        self._skip_logged: Optional[int] = None

    # ---------- run lifecycle ----------

    def start(self) -> None:
        ensure_dirs(self.cfg)
        self.begin_run()

        if not self.host.has_workload():
            self._activate_initial()

        logger.info("Script initialised")

    def begin_run(self) -> None:
        """Seed this run, pick its swap tick and apply the post-swap pause."""
        next_seed = self.randomness.seed_run(self.settings, self.session)
        self.events.log("randomness", "seeded", {
            "seed_mode": int(self.settings.seed_mode),
            "session_kind": self.session.session_kind,
            "next_seed": next_seed,
        })

        self.session.swap_deadline_ticks = compute_next_deadline(
            self.settings.min_swap_interval,
            self.settings.max_swap_interval,
            self.settings.ticks_per_second,
            self.randomness.rng,
        )
        logger.info("Swap frame set to: %s", self.session.swap_deadline_ticks)
        self.events.log("scheduler", "deadline", {"ticks": self.session.swap_deadline_ticks})

        self._run_started = self._clock()
        self._pause()

    def _activate_initial(self) -> None:
        pool = list_pool(self.cfg.workloads_path, self.cfg.disallowed_extensions)
        resume = self.session.current_workload_file
        if resume and resume in pool:
            filename = resume
        else:
            logger.info("No ROM loaded so loading one.")
            index = select_next(pool, resume, self.randomness.rng, self.cfg.select_max_attempts)
            # a single ROM still has to be loaded once
            filename = pool[0] if index is NO_SWAP else pool[index]

        self._switch_to(filename, save_outgoing=False)
        self.stats.load_into_session(filename, self.session)
        self.events.log("orchestrator", "activated", {"file": filename})
        # deadline is relative to the host's tick counter, which activation
        # reset, so only the play-time clock restarts here
        self._run_started = self._clock()

    # ---------- per-frame ----------

    def tick(self) -> None:
        tick = self.host.current_tick()
        if tick % 100 == 0:
            logger.debug("On frame %d", tick)

        if self.settings.show_countdown:
            banner = countdown_banner(tick, self.session.swap_deadline_ticks, self.settings.ticks_per_second)
            if banner is not None:
                self.host.draw_countdown(*banner)

        if tick >= self.session.swap_deadline_ticks:
            self.swap()

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Main loop: tick, then hand the frame back to the host."""
        done = 0
        while max_ticks is None or done < max_ticks:
            self.tick()
            self.host.advance_one_tick()
            done += 1

    # ---------- swap ----------

    def swap(self) -> bool:
        """Returns True when a different ROM was activated."""
        self.state = OrchestratorState.SWAPPING
        try:
            return self._swap()
        finally:
            self.state = OrchestratorState.IDLE

    def _swap(self) -> bool:
        session = self.session
        outgoing_file = session.current_workload_file
        outgoing_name = session.current_workload_name

        pool = list_pool(self.cfg.workloads_path, self.cfg.disallowed_extensions)
        index = select_next(pool, outgoing_file, self.randomness.rng, self.cfg.select_max_attempts)
        if index is NO_SWAP:
            if self._skip_logged != len(pool):
                logger.info("Pick: 1 ROM available. Nothing to swap")
                self.events.log("orchestrator", "swap_skipped", {"pool": len(pool)})
                self._skip_logged = len(pool)
            return False
        self._skip_logged = None
        logger.info("Swapping ROM...")
        filename = pool[index]
        self.events.log("orchestrator", "swap_start", {"from": outgoing_file, "to": filename})

        run = RunCounters(
            ticks=self.host.current_tick(),
            elapsed_seconds=int(self._clock() - self._run_started),
        )
        if outgoing_file:
            self.stats.flush_workload_stats(outgoing_file, session, run)

        self._switch_to(filename, save_outgoing=bool(outgoing_file))

        session.tick_count = 0
        session.play_time_seconds = 0
        session.swap_count = 0
        session.activation_count = 0
        self.stats.load_into_session(filename, session)

        self.stats.flush_session_stats(session, run, outgoing_name, outgoing_file)

        self.begin_run()

        self.events.log("orchestrator", "swap_done", {
            "file": filename,
            "name": session.current_workload_name,
            "total_swaps": session.total_swap_count,
        })
        logger.info("Swapping complete.")
        return True

    def _switch_to(self, filename: str, save_outgoing: bool) -> None:
        if save_outgoing:
            state_path = savestate_file(self.cfg, self.session.current_workload_file)
            self.host.save_resumable_state(state_path)
            logger.debug("Savestate created: %s", state_path)

        self.host.activate_workload(self.cfg.workloads_path / filename)
        self.host.load_resumable_state(savestate_file(self.cfg, filename))

        self.session.current_workload_file = filename
        self.session.current_workload_name = self.host.current_workload_display_name()
        self.session.current_platform_id = self.host.current_platform_id()
        logger.info("Loaded ROM: %s", self.session.current_workload_name)

    def _pause(self) -> None:
        """Mute and hold briefly after a swap to hide the load glitch."""
        if self.settings.pause_delay_ms < 0 or self.session.is_fresh:
            return
        sound = self.host.sound_enabled()
        self.host.set_sound_enabled(False)
        self.host.sleep_ms(self.settings.pause_delay_ms)
        self.host.set_sound_enabled(sound)
