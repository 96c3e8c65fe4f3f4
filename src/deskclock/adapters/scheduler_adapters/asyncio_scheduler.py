import asyncio
from typing import Callable, Optional

from deskclock.ports.scheduler_port import Cancellable, Scheduler
from deskclock.utils import setup_logger

logger = setup_logger(__name__)


class _OnceHandle(Cancellable):
    def __init__(self, loop: asyncio.AbstractEventLoop, delay_s: float, callback: Callable[[], None]):
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(delay_s, self._fire)

    def _fire(self):
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._callback()
        except Exception:
            logger.exception("Error in scheduled callback")

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._cancelled


class _RecurringHandle(Cancellable):
    """Re-arms itself after every call so a slow callback delays, never stacks, the next one."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_s: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval_s = interval_s
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval_s, self._fire)

    def _fire(self):
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Error in recurring callback")
        # the callback may have cancelled us
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval_s, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(Scheduler):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self.loop is None:
            self.loop = asyncio.get_running_loop()
        return self.loop

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Cancellable:
        return _OnceHandle(self._get_loop(), delay_s, callback)

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> Cancellable:
        if interval_s <= 0:
            raise ValueError("Interval must be positive")
        return _RecurringHandle(self._get_loop(), interval_s, callback)
