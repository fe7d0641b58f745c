"""Geometric threshold schedule for the adaptive retry loop."""

import math
from typing import Iterator

DECAY = 2.0 / 3.0
FLOOR = 0.0001


def threshold_schedule(initial: float, decay: float = DECAY,
                       floor: float = FLOOR) -> Iterator[float]:
    """Yield ``initial, initial*decay, ...`` up to and including the first value below ``floor``."""
    if not 0.0 < decay < 1.0:
        raise ValueError(f"decay must be in (0, 1), got {decay}")
    limit = max_attempts(initial, decay, floor)
    threshold = initial
    for _ in range(limit):
        yield threshold
        if threshold < floor:
            return
        threshold = threshold * decay


def max_attempts(initial: float, decay: float = DECAY, floor: float = FLOOR) -> int:
    """Upper bound on the number of values ``threshold_schedule`` yields."""
    if not math.isfinite(initial):
        raise ValueError(f"Threshold must be finite, got {initial}")
    if initial < floor:
        return 1
    steps = math.log(floor / initial) / math.log(decay)
    # Nudge so an exact power of decay landing on the floor is not undercounted.
    return int(math.floor(steps + 1e-9)) + 2


def count_retries(initial: float, decay: float = DECAY, floor: float = FLOOR) -> int:
    """Number of threshold reductions before the floor is crossed."""
    return max_attempts(initial, decay, floor) - 1
