from typing import Callable, Optional

from deskclock.core.heartbeat import Heartbeat
from deskclock.core.snapshot import ClockSnapshot
from deskclock.ports.scheduler_port import Scheduler
from deskclock.utils import Event
from deskclock.utils.config import CLOCK_TICK_S
from deskclock.utils.time_conversions import now_ms


class ClockTick:
    """1 Hz heartbeat publishing the current wall-clock reading to `on_tick`."""

    def __init__(self, scheduler: Scheduler, clock: Optional[Callable[[], int]] = None):
        self.clock = clock or now_ms
        self.latest = ClockSnapshot(self.clock())
        self.on_tick = Event("clock.on_tick")
        self._heartbeat = Heartbeat(scheduler, CLOCK_TICK_S, self.tick)

    @property
    def active(self) -> bool:
        return self._heartbeat.active

    def start(self):
        self._heartbeat.start()

    def stop(self):
        self._heartbeat.stop()

    def tick(self) -> ClockSnapshot:
        self.latest = ClockSnapshot(self.clock())
        self.on_tick.emit(self.latest)
        return self.latest
