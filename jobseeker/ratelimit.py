"""Fixed-interval gate that spaces out consecutive requests to one source."""
from __future__ import annotations

import time
from typing import Callable


class RateGate:
    """Blocks in :meth:`wait` until *min_interval* seconds have passed since the last pass.

    ``clock`` and ``sleep`` are injectable so tests can run without wall-clock waits.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def wait(self) -> float:
        """Wait for the gate to open; returns the seconds slept."""
        slept = 0.0
        if self._last is not None:
            remaining = self.min_interval - (self._clock() - self._last)
            if remaining > 0:
                self._sleep(remaining)
                slept = remaining
        self._last = self._clock()
        return slept

    def reset(self) -> None:
        self._last = None
