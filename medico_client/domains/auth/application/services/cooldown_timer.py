# ============================================================================
# SCOPE: APPLICATION LAYER (Auth)
# Description: Cancellable once-per-second ticker for the resend cooldown.
# ============================================================================
"""Cooldown Timer.

Runs ``on_tick`` once per interval on a background asyncio task until the
callback reports zero remaining, or until the owner stops it. The owner
must stop it on teardown; a stopped timer never fires again.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class CooldownTimer:
    """Background ticker owned by a single controller."""

    def __init__(
        self,
        on_tick: Callable[[], int],
        interval: float = 1.0,
        sleep: SleepFunc | None = None,
    ):
        """
        Args:
            on_tick: Called every interval; returns the seconds remaining.
            interval: Seconds between ticks.
            sleep: Awaitable sleep, replaceable in tests.
        """
        self._on_tick = on_tick
        self._interval = interval
        self._sleep = sleep or asyncio.sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; a running ticker is replaced. Needs a running loop."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.create_task(self._run(), name="cooldown-timer")
        logger.debug("Cooldown timer started")

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish. Idempotent."""
        task = self._task
        self._task = None
        if task is None:
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Cooldown timer stopped")

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval)
            remaining = self._on_tick()
            if remaining <= 0:
                logger.debug("Cooldown expired")
                return
