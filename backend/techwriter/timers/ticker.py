"""Ticker — one shared "current instant" refreshed on an asyncio task.

Displays read ``current_time`` instead of counting ticks, so elapsed
time stays right when the loop is starved or the process sleeps.

Usage:
    ticker = Ticker(clock=store.clock, interval_seconds=1.0)
    await ticker.start()
    engine = TimerEngine(store, ticker=ticker)
    # ... UI renders engine.formatted_elapsed(timer_id) on each tick ...
    ticker.stop()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from techwriter.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class Ticker:
    """Refreshes ``current_time`` from a clock every ``interval_seconds``."""

    def __init__(
        self,
        clock: Clock | None = None,
        interval_seconds: float = 1.0,
        on_tick: Callable[[datetime], None] | None = None,
    ) -> None:
        self.clock: Clock = clock or SystemClock()
        self.interval_seconds = interval_seconds
        self.on_tick = on_tick
        self.current_time: datetime = self.clock.now()
        self._task: asyncio.Task | None = None
        self._running = False

    async def start(self) -> None:
        if self._running:
            logger.warning("Ticker already running")
            return

        self._running = True
        self.tick()
        self._task = asyncio.create_task(self._loop())
        logger.debug("Ticker started (interval: %.2fs)", self.interval_seconds)

    def stop(self) -> None:
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            logger.debug("Ticker stopped")

    def tick(self) -> datetime:
        """Re-read the clock now and notify the tick callback."""
        self.current_time = self.clock.now()
        if self.on_tick is not None:
            self.on_tick(self.current_time)
        return self.current_time

    async def _loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
                if not self._running:
                    break
                self.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                # A broken display callback must not stop the clock
                logger.error("Tick callback failed: %s", e, exc_info=True)

    @property
    def is_running(self) -> bool:
        return self._running and self._task is not None and not self._task.done()
