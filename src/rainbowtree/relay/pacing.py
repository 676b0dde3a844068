"""Random inter-line delay policy."""

from __future__ import annotations

import random
from typing import Optional

from ..constants import (
    DEFAULT_PACING_THRESHOLD,
    PACING_DRAW_UPPER,
    PACING_MAX_STEPS,
    PACING_MIN_STEPS,
    PACING_STEP_MS,
)


class PacingGenerator:
    """Decides whether to pause after a line, and for how long.

    With the default threshold about one line in ten is delayed, by
    5 to 95 ms in 5 ms steps. A threshold of 0 never delays.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        threshold: int = DEFAULT_PACING_THRESHOLD,
    ) -> None:
        if not 0 <= threshold <= PACING_DRAW_UPPER:
            raise ValueError(f"threshold must be between 0 and {PACING_DRAW_UPPER}")
        self._rng = rng if rng is not None else random.Random()
        self.threshold = threshold

    def should_delay(self) -> bool:
        return self._rng.randrange(0, PACING_DRAW_UPPER) < self.threshold

    def delay_millis(self) -> int:
        return self._rng.randint(PACING_MIN_STEPS, PACING_MAX_STEPS) * PACING_STEP_MS

    def next_delay(self) -> Optional[int]:
        """Return a delay in milliseconds, or None when this line is not paced."""
        if self.threshold == 0 or not self.should_delay():
            return None
        return self.delay_millis()
