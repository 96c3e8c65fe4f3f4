from dataclasses import dataclass
from typing import Optional

from deskclock.tools.time_tools.base_tool import TimeTool, coerce_ms
from deskclock.utils.config import STOPWATCH_TICK_S
from deskclock.utils.time_conversions import format_stopwatch, stopwatch_parts
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

STORE_KEY = "stopwatchElapsedMs"


@dataclass
class StopwatchState:
    running: bool = False
    accumulated_ms: int = 0
    start_epoch_ms: Optional[int] = None
    # last value published by a tick or transition
    elapsed_ms: int = 0


class StopwatchEngine(TimeTool):
    """
    Start/pause/reset elapsed-time accumulator.

    While running, elapsed is `now - start_epoch_ms`; resuming sets
    `start_epoch_ms = now - accumulated_ms` so the count carries on from the
    frozen value. A reload never resumes a running stopwatch: only the last
    elapsed value is restored, paused.
    """
    def __init__(self, store, scheduler, clock=None):
        super().__init__(store, scheduler, STOPWATCH_TICK_S, clock)
        elapsed = coerce_ms(self.store.load(STORE_KEY, 0))
        self.state = StopwatchState(accumulated_ms=elapsed, elapsed_ms=elapsed)

    @property
    def is_running(self):
        return self.state.running

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_at(self.clock())

    def _elapsed_at(self, now: int) -> int:
        if self.state.running and self.state.start_epoch_ms is not None:
            # a backward clock jump must not yield a negative duration
            return max(0, now - self.state.start_epoch_ms)
        return self.state.accumulated_ms

    def start_pause(self):
        if self.state.running:
            self.pause()
        else:
            self.start()

    def start(self):
        if self.state.running:
            logger.warning("Stopwatch is already running.")
            return
        now = self.clock()
        self.state.start_epoch_ms = now - self.state.accumulated_ms
        self.state.running = True
        self._heartbeat.start()
        self._persist(STORE_KEY, self.state.elapsed_ms)
        self.on_start.emit(elapsed_ms=self.state.elapsed_ms)
        logger.info("Stopwatch started.")

    def pause(self):
        if not self.state.running:
            return
        self._heartbeat.stop()
        elapsed = self._elapsed_at(self.clock())
        self.state.running = False
        self.state.accumulated_ms = elapsed
        self.state.start_epoch_ms = None
        self.state.elapsed_ms = elapsed
        self._persist(STORE_KEY, elapsed)
        self.on_pause.emit(elapsed_ms=elapsed)
        logger.info(f"Stopwatch paused at {format_stopwatch(elapsed)}.")

    def reset(self):
        self._heartbeat.stop()
        self.state = StopwatchState()
        self._persist(STORE_KEY, 0)
        self.on_reset.emit(elapsed_ms=0)
        logger.info("Stopwatch reset.")

    def tick(self):
        if not self.state.running:
            return
        elapsed = self._elapsed_at(self.clock())
        self.state.elapsed_ms = elapsed
        self._persist(STORE_KEY, elapsed)
        self.on_tick.emit(elapsed_ms=elapsed)

    def get_status(self):
        elapsed = self.state.elapsed_ms
        minutes, seconds, centiseconds = stopwatch_parts(elapsed)
        return {
            "is_running": self.state.running,
            "elapsed_ms": elapsed,
            "minutes": minutes,
            "seconds": seconds,
            "centiseconds": centiseconds,
            "elapsed_formatted": format_stopwatch(elapsed),
        }
