"""Single-slot delay gate that paces the tick loop."""

import time
from typing import Callable, Optional


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


class DelayScheduler:
    """Tracks one pending re-entry delay.

    Scheduling always overwrites the previous delay; there is no stacking
    and no clamping beyond treating negative durations as zero.

    Example:
        scheduler = DelayScheduler()
        scheduler.schedule(5000)
        if scheduler.ready():
            ...
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms) -> None:
        """Initialize the scheduler.

        Args:
            clock: Returns the current time in milliseconds. Defaults to
                monotonic_ms; tests pass a fake clock.
        """
        self._clock = clock
        self._started_at: Optional[float] = None
        self._duration_ms: float = 0

    def schedule(self, duration_ms: float) -> None:
        """Start a new delay of duration_ms, replacing any pending one."""
        self._started_at = self._clock()
        self._duration_ms = max(0, duration_ms)

    def ready(self) -> bool:
        """Whether the pending delay (if any) has elapsed."""
        return self.remaining_ms() <= 0

    def remaining_ms(self) -> float:
        """Milliseconds left before ready() turns true (0 when ready)."""
        if self._started_at is None:
            return 0
        elapsed_ms = self._clock() - self._started_at
        return max(0, self._duration_ms - elapsed_ms)

    @property
    def duration_ms(self) -> float:
        """Duration of the most recently scheduled delay."""
        return self._duration_ms
