from dataclasses import dataclass
from typing import Optional

from deskclock.tools.time_tools.base_tool import TimeTool, coerce_ms
from deskclock.utils import Event
from deskclock.utils.config import TIMER_FLASH_S, TIMER_TICK_S
from deskclock.utils.time_conversions import (
    countdown_parts, duration_parts, format_minutes_seconds,
)
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

STORE_KEY = "timerRemainingMs"


@dataclass
class TimerState:
    running: bool = False
    remaining_ms: int = 0
    end_epoch_ms: Optional[int] = None
    # duration last configured, used by "restart with same duration"
    base_ms: int = 0
    # set for TIMER_FLASH_S after the countdown reaches zero
    expired: bool = False


class TimerEngine(TimeTool):
    """
    Countdown to zero computed from an absolute end timestamp.

    Reaching zero while running stops the timer, emits `on_expired` once and
    raises the `expired` flag for a short flash window. A reload restores the
    remaining time paused.
    """
    def __init__(self, store, scheduler, clock=None):
        super().__init__(store, scheduler, TIMER_TICK_S, clock)
        remaining = coerce_ms(self.store.load(STORE_KEY, 0))
        self.state = TimerState(remaining_ms=remaining, base_ms=remaining)
        self._flash_handle = None
        self.on_expired = Event("timer.on_expired")

    @property
    def is_running(self):
        return self.state.running

    @property
    def expired(self) -> bool:
        return self.state.expired

    def _remaining_at(self, now: int) -> int:
        if not self.state.running or self.state.end_epoch_ms is None:
            return self.state.remaining_ms
        left = max(0, self.state.end_epoch_ms - now)
        # a backward clock jump must not add time beyond what was armed
        return min(left, self.state.base_ms) if self.state.base_ms else left

    def start(self, duration_ms: Optional[int] = None):
        """
        Arms the countdown. While already running the current remaining time
        is used instead of `duration_ms`, so a resume never rewinds the timer.
        Without a duration a stopped timer resumes from its remaining time, or
        restarts its last configured duration.
        """
        if duration_ms is not None and duration_ms <= 0:
            logger.warning(f"Timer start ignored, non-positive duration ({duration_ms} ms).")
            return
        now = self.clock()
        if self.state.running:
            effective = self._remaining_at(now)
        elif duration_ms is None:
            effective = self.state.remaining_ms if self.state.remaining_ms > 0 else self.state.base_ms
        else:
            effective = int(duration_ms)
        if effective <= 0:
            logger.warning(f"Timer start ignored, nothing to count down ({effective} ms).")
            return

        if not self.state.running:
            self._clear_expiry_flash()
            self.state.base_ms = effective
        self.state.end_epoch_ms = now + effective
        self.state.remaining_ms = effective
        self.state.running = True
        self._heartbeat.start()
        self._persist(STORE_KEY, effective)
        self.on_start.emit(remaining_ms=effective)
        logger.info(f"Timer started for {effective} ms.")

    def resume(self):
        if self.state.running:
            logger.warning("Timer is already running.")
            return
        self.start()

    def pause(self):
        if not self.state.running:
            return
        self._heartbeat.stop()
        left = self._remaining_at(self.clock())
        self.state.remaining_ms = left
        # a partially consumed timer restarts from here, not from the original duration
        self.state.base_ms = left
        self.state.end_epoch_ms = None
        self.state.running = False
        self._persist(STORE_KEY, left)
        self.on_pause.emit(remaining_ms=left)
        logger.info(f"Timer paused with {left} ms left.")

    def reset(self):
        self._heartbeat.stop()
        self._clear_expiry_flash()
        self.state = TimerState()
        self._persist(STORE_KEY, 0)
        self.on_reset.emit(remaining_ms=0)
        logger.info("Timer reset.")

    def tick(self):
        if not self.state.running:
            return
        left = self._remaining_at(self.clock())
        self.state.remaining_ms = left
        if left == 0:
            self._heartbeat.stop()
            self.state.running = False
            self.state.end_epoch_ms = None
        self._persist(STORE_KEY, left)
        self.on_tick.emit(remaining_ms=left)
        if left == 0:
            self._begin_expiry_flash()
            logger.info("Timer finished!")
            self.on_expired.emit()

    def _begin_expiry_flash(self):
        self._clear_expiry_flash()
        self.state.expired = True
        self._flash_handle = self.scheduler.call_later(TIMER_FLASH_S, self._end_expiry_flash)

    def _end_expiry_flash(self):
        self._flash_handle = None
        self.state.expired = False
        self.on_tick.emit(remaining_ms=self.state.remaining_ms)

    def _clear_expiry_flash(self):
        if self._flash_handle is not None:
            self._flash_handle.cancel()
            self._flash_handle = None
        self.state.expired = False

    def shutdown(self):
        super().shutdown()
        self._clear_expiry_flash()

    def display_parts(self):
        """
        (minutes, seconds) for the timer face. An idle timer with nothing left
        shows its last configured duration instead of 00:00.
        """
        if self.state.running or self.state.remaining_ms > 0:
            return countdown_parts(self.state.remaining_ms)
        return duration_parts(self.state.base_ms)

    def phase(self) -> str:
        if self.state.running:
            return "TIMER RUN"
        if self.state.remaining_ms > 0:
            return "PAUSE"
        return "SET"

    def get_status(self):
        minutes, seconds = self.display_parts()
        return {
            "is_running": self.state.running,
            "remaining_ms": self.state.remaining_ms,
            "base_ms": self.state.base_ms,
            "expired": self.state.expired,
            "phase": self.phase(),
            "remaining_formatted": format_minutes_seconds(minutes, seconds),
        }
