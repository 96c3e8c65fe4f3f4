from typing import Callable, Optional

from deskclock.ports.scheduler_port import Cancellable, Scheduler


class Heartbeat:
    """
    A recurring callback that can be switched on and off.

    `stop()` cancels the pending call before returning, so once an engine
    has stopped its heartbeat no stale tick can overwrite the state it just set.
    """

    def __init__(self, scheduler: Scheduler, interval_s: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.interval_s = interval_s
        self.callback = callback
        self._handle: Optional[Cancellable] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def start(self):
        if self.active:
            return
        self._handle = self.scheduler.call_every(self.interval_s, self.callback)

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
