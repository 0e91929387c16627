"""Periodic scan driver on a single asyncio event loop.

All scan steps (and therefore all timer ticks) run on one loop, one at a
time.  The only suspension point is the wait for the next period.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ._context import ScanEngine

logger = logging.getLogger(__name__)


class ScanDriver:
    """Issues one ``engine.step()`` per scan period while the engine is RUNNING.

    Parameters
    ----------
    engine : ScanEngine
        The engine to drive.
    period_s : float | None
        Wall-clock period between scans.  Defaults to the engine's
        ``scan_period_ms``.
    """

    def __init__(self, engine: ScanEngine, period_s: float | None = None) -> None:
        self.engine = engine
        self.period_s = period_s if period_s is not None else engine.config.scan_period_ms / 1000
        self._task: asyncio.Task[int] | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, max_scans: int | None = None) -> int:
        """Step the engine until it leaves RUNNING or *max_scans* is reached.

        Returns the number of scans executed.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        count = 0
        while self.engine.running:
            self.engine.step()
            count += 1
            if max_scans is not None and count >= max_scans:
                break
            deadline += self.period_s
            await asyncio.sleep(max(0.0, deadline - loop.time()))
        logger.debug("Driver finished after %d scans in %s mode", count, self.engine.mode.value)
        return count

    def start(self, max_scans: int | None = None) -> asyncio.Task[int]:
        """Switch the engine to RUNNING and schedule ``run()`` on the current loop."""
        if self.active:
            raise RuntimeError("scan driver is already running")
        self.engine.run()
        self._task = asyncio.get_running_loop().create_task(self.run(max_scans))
        return self._task

    async def pause(self) -> None:
        """Cancel the driver and put the engine in STOPPED (timers halted)."""
        self.engine.pause()
        await self._cancel()

    async def stop(self) -> None:
        """Cancel the driver and put the engine in IDLE (timer counts zeroed)."""
        self.engine.stop()
        await self._cancel()

    async def _cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
