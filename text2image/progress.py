"""
progress.py — Synthetic progress estimate for a single generation request.

The backend exposes no progress signal, so the percentage is a local guess:
a counter advanced on a fixed period, held just under the ceiling with a
little jitter, and only set to 100 once the caller reports success.

Usage:
    progress = SyntheticProgress(on_progress, increment=15)
    async with progress:
        ...await the backend...
    progress.complete()

Leaving the `async with` block cancels the ticking task on every path,
so no callback fires after the request is over.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

DEFAULT_INTERVAL = 0.4      # seconds between ticks
DEFAULT_CEILING = 90        # counter is held here until the request ends
MAX_SIMULATED = 99          # never report 100 from a tick
JITTER = 2.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SyntheticProgress:
    """Owns one background ticking task for the lifetime of one request."""

    def __init__(
        self,
        on_progress: Optional[ProgressCallback],
        increment: float,
        interval: float = DEFAULT_INTERVAL,
        ceiling: float = DEFAULT_CEILING,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.on_progress = on_progress
        self.increment = increment
        self.interval = interval
        self.ceiling = ceiling
        self._rng = rng or random.Random()
        self._counter = 0.0
        self._last_reported = -1
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_reported(self) -> Optional[int]:
        return self._last_reported if self._last_reported >= 0 else None

    async def __aenter__(self) -> "SyntheticProgress":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def start(self) -> None:
        if self.on_progress is None or self._task is not None:
            return
        self._report(0)
        self._task = asyncio.create_task(self._tick_forever())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the ticker's own cancellation ends here; a cancelled caller keeps its.
            if not task.cancelled() or _cancelling(asyncio.current_task()):
                raise

    def complete(self) -> None:
        """Report 100. Only call after stop(), on success."""
        if self.running:
            raise RuntimeError("complete() called while progress is still ticking")
        if self.on_progress is not None:
            self._report(100)

    def advance(self) -> int:
        """Advance the counter by one tick and return the value to report."""
        self._counter += self.increment
        if self._counter > self.ceiling:
            self._counter = self.ceiling + self._rng.random() * JITTER
        return min(round_half_up(self._counter), MAX_SIMULATED)

    async def _tick_forever(self) -> None:
        while self.on_progress is not None:
            await asyncio.sleep(self.interval)
            self._report(self.advance())

    def _report(self, percent: int) -> None:
        """Forward one value to the observer. An observer that raises is dropped."""
        # Jitter may dip below an earlier value; observers only ever see it climb.
        percent = max(percent, self._last_reported)
        self._last_reported = percent
        try:
            self.on_progress(percent)
        except Exception as exc:
            logger.warning(f"Progress observer raised ({exc}), stopping progress updates")
            self.on_progress = None


def _cancelling(task: Optional[asyncio.Task]) -> bool:
    # Task.cancelling() exists from Python 3.11 on.
    cancelling = getattr(task, "cancelling", None)
    return bool(cancelling and cancelling())
