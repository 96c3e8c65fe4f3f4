from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from deskclock.core.heartbeat import Heartbeat
from deskclock.ports.scheduler_port import Scheduler
from deskclock.ports.store_port import PersistentStore
from deskclock.utils import Event
from deskclock.utils.logging_handler import setup_logger
from deskclock.utils.time_conversions import now_ms

logger = setup_logger(__name__)


def coerce_ms(value: Any) -> int:
    """Turns a persisted millisecond value into a non-negative int, 0 if unusable."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


class TimeTool(ABC):
    """
    An abstract base class for the running engines (stopwatch, countdown timer).
    It owns the engine's heartbeat, its clock source and its store, and the
    event hooks renderers subscribe to.

    Engines never sum tick intervals: every tick recomputes its value from an
    absolute epoch timestamp, so late or skipped ticks do not drift the result.
    """
    def __init__(self, store: PersistentStore, scheduler: Scheduler,
                 interval_s: float, clock: Optional[Callable[[], int]] = None):
        """Initializes the TimeTool with its collaborators and event hooks."""
        self.store = store
        self.scheduler = scheduler
        self.clock = clock or now_ms
        self._heartbeat = Heartbeat(scheduler, interval_s, self.tick)

        self.on_tick = Event(f"{self.__class__.__name__}.on_tick")
        self.on_start = Event(f"{self.__class__.__name__}.on_start")
        self.on_pause = Event(f"{self.__class__.__name__}.on_pause")
        self.on_reset = Event(f"{self.__class__.__name__}.on_reset")

    @property
    @abstractmethod
    def is_running(self) -> bool:
        pass

    @property
    def heartbeat_active(self) -> bool:
        return self._heartbeat.active

    def _persist(self, key: str, value: Any):
        """Best-effort write. A failed save is logged by the store and otherwise ignored."""
        if not self.store.save(key, value):
            logger.warning(f"{self.__class__.__name__} could not persist '{key}'.")

    def shutdown(self):
        """Stops the heartbeat without touching state, for process exit."""
        self._heartbeat.stop()

    @abstractmethod
    def tick(self):
        """
        Heartbeat callback. Recomputes the derived value from the clock,
        publishes it and persists it.
        """
        pass

    @abstractmethod
    def reset(self):
        pass

    @abstractmethod
    def get_status(self) -> dict:
        """Returns a dictionary of the current state, suitable for JSON."""
        pass
