"""
Heartbeat Scheduler

Runs a send callback forever at a jittered cadence until stopped.
Every cycle waits `interval_seconds * jitter()` with a freshly drawn jitter,
so gaps between heartbeats are irregular and usually shorter than the
nominal interval.
"""

import asyncio
import contextlib
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

LOG = logging.getLogger(__name__)


@dataclass
class HeartbeatScheduler:
    """
    Cancellable periodic task.

    Usage:
        scheduler = HeartbeatScheduler()
        scheduler.start(41.25, client.send_heartbeat)
        ...
        await scheduler.stop()
    """

    jitter: Callable[[], float] = random.random
    task: asyncio.Task[None] | None = field(default=None, init=False)
    cancelled: asyncio.Event | None = field(default=None, init=False)

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self, interval_seconds: float, callback: Callable[[], Awaitable[None]]) -> None:
        """Start ticking, replacing any previous task."""
        if self.running:
            LOG.debug("Replacing running heartbeat task")
            self.cancel()

        cancelled = asyncio.Event()
        self.cancelled = cancelled
        self.task = asyncio.create_task(self.run(interval_seconds, callback, cancelled))
        LOG.debug("Heartbeat started with interval %.3fs", interval_seconds)

    def cancel(self) -> None:
        """Request cancellation without waiting for the task to finish."""
        if self.cancelled is not None:
            self.cancelled.set()
        if self.task is not None:
            self.task.cancel()

    async def stop(self) -> None:
        """Cancel the task and wait until it has finished."""
        task = self.task
        self.cancel()
        self.task = None

        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
            LOG.debug("Heartbeat stopped")

    async def run(
        self,
        interval_seconds: float,
        callback: Callable[[], Awaitable[None]],
        cancelled: asyncio.Event,
    ) -> None:
        while not cancelled.is_set():
            await asyncio.sleep(interval_seconds * self.jitter())

            # A wait may finish in the same loop iteration as cancel().
            if cancelled.is_set():
                return

            try:
                await callback()
            except Exception:
                LOG.exception("Heartbeat callback failed")
