"""
Frame scheduling for the simulation loop.

The loop reschedules itself one frame at a time; nothing is scheduled
unless a tick asks for it, so leaving PLAYING stops the loop.
"""

from abc import ABC, abstractmethod
from typing import Callable
import asyncio
import logging

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class FrameScheduler(ABC):
    """Abstract one-shot scheduler.

    At most one callback is pending at a time; scheduling a new one
    replaces the previous.
    """

    @abstractmethod
    def schedule_next(self, interval_ms: float, callback: Callback) -> None:
        """Run callback once after interval_ms."""
        ...

    @abstractmethod
    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        ...

    @property
    @abstractmethod
    def pending(self) -> bool:
        """Whether a callback is waiting to run."""
        ...


class AsyncioFrameScheduler(FrameScheduler):
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_next(self, interval_ms: float, callback: Callback) -> None:
        self.cancel()

        def run() -> None:
            self._handle = None
            callback()

        self._handle = self._get_loop().call_later(interval_ms / 1000.0, run)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None


class Debouncer:
    """Coalesces bursts of calls into one trailing call.

    Every trigger() restarts the wait; only the last callback runs,
    wait_ms after the burst ends.
    """

    def __init__(self, wait_ms: float, scheduler: FrameScheduler) -> None:
        self.wait_ms = wait_ms
        self._scheduler = scheduler
        self._callback: Callback | None = None

    def trigger(self, callback: Callback) -> None:
        """Replace the pending call and restart the wait."""
        self._callback = callback
        self._scheduler.schedule_next(self.wait_ms, self._fire)

    def flush(self) -> None:
        """Run the pending call now."""
        self._scheduler.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending call."""
        self._scheduler.cancel()
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            logger.debug("Debounced call fired")
            callback()
