from __future__ import annotations

import random


def compute_next_deadline(
    min_interval: float,
    max_interval: float,
    ticks_per_second: int,
    rng: random.Random,
) -> int:
    """
    Pick the tick to swap on.

    Equal bounds give a fixed interval; otherwise a uniform draw between the
    two bounds, inclusive. Ticks stand in for time and drift from the wall
    clock whenever the host doesn't run at `ticks_per_second`.
    """
    lo = int(min_interval * ticks_per_second)
    hi = int(max_interval * ticks_per_second)
    if lo == hi:
        return hi
    if lo > hi:
        lo, hi = hi, lo
    return rng.randint(lo, hi)
