from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional


class Ticker:
    """Fixed-interval ticker that skips missed ticks.

    Deadlines sit on multiples of ``interval`` from the start time. If the
    caller falls behind, the overdue tick fires once, immediately, and the next
    deadline jumps to the first multiple after "now"; missed ticks are never
    queued, so a stall never produces a burst of catch-up ticks.
    """

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        start: Optional[float] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._interval = interval
        self._clock = clock
        self._start = clock() if start is None else start
        self._deadline = self._start + interval
        self._ticks = 0
        self._skipped = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def deadline(self) -> float:
        return self._deadline

    @property
    def skipped(self) -> int:
        """Total ticks coalesced away because the caller fell behind."""
        return self._skipped

    async def tick(self) -> int:
        """Wait for the next deadline; returns the running tick count."""
        delay = self._deadline - self._clock()
        if delay > 0:
            await asyncio.sleep(delay)
        self._advance(self._clock())
        self._ticks += 1
        return self._ticks

    def _advance(self, now: float) -> None:
        fired = self._deadline
        missed = int((now - fired) // self._interval) if now > fired else 0
        deadline = fired + self._interval * (missed + 1)
        # float rounding can land exactly on "now"
        while deadline <= now:
            missed += 1
            deadline += self._interval
        self._skipped += missed
        self._deadline = deadline
