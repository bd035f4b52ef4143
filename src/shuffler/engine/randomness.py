from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Optional

from ..schemas import SeedMode, SessionState, Settings

logger = logging.getLogger(__name__)

CHAIN_RANGE = 1_000_000


class RandomnessManager:
    """
    Owns the generator for one run and the seed chain between runs.

    Seeding per run:
    - UNSEEDED: wall clock, nothing is reproducible
    - SEEDED, fresh session: the operator's `seed` setting
    - SEEDED, resumed session: the chain value the previous run published

    After seeding, one draw becomes the chain value published for the next
    run. The seed the current run used is not kept.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.rng = random.Random()
        self._clock = clock or time.time

    def seed_run(self, settings: Settings, session: SessionState) -> int:
        seed = int(self._clock())
        if settings.seed_mode == SeedMode.SEEDED:
            seed = settings.seed if session.is_fresh else session.seed_chain_value

        self.rng.seed(seed)

        next_seed = math.floor(self.rng.random() * CHAIN_RANGE)
        session.seed_chain_value = next_seed
        logger.debug("Next seed: %s", next_seed)
        return next_seed
