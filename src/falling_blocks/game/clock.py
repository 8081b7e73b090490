from __future__ import annotations

from typing import Optional


class FixedStepClock:
    """Turns elapsed wall time into a whole number of logical ticks.

    Leftover time is carried to the next call, so a slow frame yields several
    ticks and a fast one yields none.
    """

    def __init__(self, ticks_per_second: int, max_ticks_per_frame: Optional[int] = None) -> None:
        if ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be positive")
        self.tick_length = 1.0 / float(ticks_per_second)
        self.max_ticks_per_frame = max_ticks_per_frame
        self.residual = 0.0

    def advance(self, elapsed_seconds: float) -> int:
        if elapsed_seconds < 0:
            raise ValueError("elapsed time cannot be negative")
        self.residual += elapsed_seconds
        ticks = int(self.residual // self.tick_length)
        self.residual -= ticks * self.tick_length
        if self.max_ticks_per_frame is not None and ticks > self.max_ticks_per_frame:
            # Drop the backlog instead of spiralling after a long stall.
            ticks = self.max_ticks_per_frame
            self.residual = 0.0
        return ticks

    def reset(self) -> None:
        self.residual = 0.0
