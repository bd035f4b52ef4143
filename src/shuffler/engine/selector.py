from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Union

from ..errors import NoWorkloadsError

logger = logging.getLogger(__name__)


class _NoSwap:
    def __repr__(self) -> str:
        return "NO_SWAP"


# returned when there is nothing to rotate to
NO_SWAP = _NoSwap()


def select_next(
    pool: Sequence[str],
    current: str,
    rng: random.Random,
    max_attempts: Optional[int] = None,
) -> Union[int, _NoSwap]:
    """
    Pick the index of the next workload in POOL.

    Redraws while the pick is CURRENT. Entries are compared by filename, not
    position, since the pool is rescanned and may have changed. With
    `max_attempts=None` the redraw is unbounded; otherwise the last draw is
    accepted once the cap is hit.

    Raises NoWorkloadsError for an empty pool.
    """
    count = len(pool)
    if count == 0:
        raise NoWorkloadsError("No ROMs available.")
    if count == 1:
        logger.debug("Pick: 1 ROM available. Nothing to swap")
        return NO_SWAP

    index = rng.randrange(count)
    attempts = 1
    # compared by filename, not display name: two files sharing a name can't loop forever
    while pool[index] == current:
        if max_attempts is not None and attempts >= max_attempts:
            logger.warning("Gave up avoiding a repeat after %d draws", attempts)
            break
        index = rng.randrange(count)
        attempts += 1
    return index
