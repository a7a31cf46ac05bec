"""PeriodicExecutor -- asyncio interval timer with a single-slot guard.

The callback runs once immediately on start() and then every `frequency`
seconds. If the previous run hasn't finished when the timer fires, that
firing is dropped: runs are never queued and never overlap.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger


class PeriodicExecutor:
    """Runs an async callback on a fixed interval, one run at a time."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        frequency: float,
        name: str = "periodic",
    ) -> None:
        self._callback = callback
        self._frequency = frequency
        self._name = name
        self._timer: Optional[asyncio.Task] = None
        self._current: Optional[asyncio.Task] = None
        self._runs = 0
        self._skipped = 0

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def busy(self) -> bool:
        """True while a callback run is in flight."""
        return self._current is not None and not self._current.done()

    @property
    def stats(self) -> dict:
        return {
            "name": self._name,
            "running": self.running,
            "busy": self.busy,
            "runs": self._runs,
            "skipped": self._skipped,
        }

    def start(self) -> None:
        """Start the timer. Must be called from within a running event loop."""
        if self.running:
            return
        self._timer = asyncio.get_running_loop().create_task(self._timer_loop())

    def stop(self) -> None:
        """Stop the timer. A run already in flight is left to complete."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None

    async def wait_idle(self) -> None:
        """Wait for the in-flight run, if any."""
        if self._current is not None:
            await asyncio.gather(self._current, return_exceptions=True)

    async def _timer_loop(self) -> None:
        while True:
            self.on_timer_event()
            await asyncio.sleep(self._frequency)

    def on_timer_event(self) -> bool:
        """Fire once. Returns False if the firing was dropped."""
        if self.busy:
            self._skipped += 1
            return False
        self._current = asyncio.get_running_loop().create_task(self._execute())
        return True

    async def _execute(self) -> None:
        self._runs += 1
        try:
            await self._callback()
        except Exception as e:
            # a failing run must not kill the timer
            logger.error(f"{self._name}: periodic callback failed: {e}")
