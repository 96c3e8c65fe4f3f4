from abc import ABC, abstractmethod
from typing import Callable


class Cancellable(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent any further call. Takes effect before returning."""
        pass

    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """Port for the single logical event loop that drives every heartbeat."""

    @abstractmethod
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Cancellable:
        """Run `callback` once after `delay_s` seconds."""
        pass

    @abstractmethod
    def call_every(self, interval_s: float, callback: Callable[[], None]) -> Cancellable:
        """Run `callback` every `interval_s` seconds until the handle is cancelled."""
        pass
