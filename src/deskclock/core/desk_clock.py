from typing import Callable, Optional

from deskclock.core.modes import Mode
from deskclock.core.snapshot import ClockSnapshot, DisplayState, ModeSnapshot
from deskclock.ports.scheduler_port import Scheduler
from deskclock.ports.store_port import PersistentStore
from deskclock.tools.time_tools import (
    AlarmScheduler, ClockTick, ModeCycler, StopwatchEngine, TimerEngine,
)
from deskclock.tools.weather_tools.temperature_feed import SEARCHING, STATUS_OK, TemperatureReading
from deskclock.utils import Event
from deskclock.utils.clock_format import format_clock, format_date
from deskclock.utils.logging_handler import setup_logger
from deskclock.utils.time_conversions import (
    convert_to_ms, format_minutes_seconds, format_stopwatch, now_ms,
)

logger = setup_logger(__name__)

IS24H_KEY = "is24h"
IS_CELSIUS_KEY = "isCelsius"


class DeskClock:
    """
    Top-level coordinator. Owns one instance of each engine, exposes the
    imperative operations a renderer calls, and publishes a DisplayState on
    `on_display` after every clock tick and every engine change.

    The engines share nothing: the clock tick feeds the alarm and the display,
    the stopwatch and timer run on their own heartbeats.
    """
    def __init__(self, store: PersistentStore, scheduler: Scheduler,
                 clock: Optional[Callable[[], int]] = None, tz=None):
        self.store = store
        self.scheduler = scheduler
        self.clock = clock or now_ms
        self.tz = tz

        self.is24h = bool(store.load(IS24H_KEY, True))
        self.is_celsius = bool(store.load(IS_CELSIUS_KEY, True))
        self.weather = SEARCHING

        self.clock_tick = ClockTick(scheduler, self.clock)
        self.stopwatch = StopwatchEngine(store, scheduler, self.clock)
        self.timer = TimerEngine(store, scheduler, self.clock)
        self.alarm = AlarmScheduler(store, scheduler, tz)
        self.modes = ModeCycler(store, scheduler)

        self.on_display = Event("display")

        self.clock_tick.on_tick.add_listener(self._on_clock_tick)
        for tool in (self.stopwatch, self.timer):
            for event in (tool.on_tick, tool.on_start, tool.on_pause, tool.on_reset):
                event.add_listener(self._on_engine_change)
        self.timer.on_expired.add_listener(self._on_engine_change)
        for event in (self.alarm.on_fired, self.alarm.on_silenced, self.alarm.on_change,
                      self.modes.on_change):
            event.add_listener(self._on_engine_change)

    # --- lifecycle ---
    def start(self):
        self.clock_tick.start()
        self.modes.start()
        logger.info("Desk clock started.")

    def stop(self):
        self.clock_tick.stop()
        self.modes.stop()
        self.stopwatch.shutdown()
        self.timer.shutdown()
        self.alarm.shutdown()
        logger.info("Desk clock stopped.")

    # --- wiring ---
    def _on_clock_tick(self, snapshot: ClockSnapshot):
        # the alarm sees exactly the reading this tick renders
        self.alarm.check(snapshot)
        self.publish()

    def _on_engine_change(self, *args, **kwargs):
        self.publish()

    def publish(self):
        self.on_display.emit(self.display_state())

    # --- imperative operations ---
    def cycle_mode(self) -> Mode:
        return self.modes.cycle()

    def stopwatch_start_pause(self):
        self.stopwatch.start_pause()

    def stopwatch_reset(self):
        self.stopwatch.reset()

    def timer_start(self, duration_ms: Optional[int] = None):
        self.timer.start(duration_ms)

    def timer_set(self, minutes: int, seconds: int):
        """Configures and starts a new countdown, discarding the previous one."""
        total = max(0, int(minutes) * 60 + int(seconds))
        self.timer.reset()
        self.timer.start(convert_to_ms(seconds=total))

    def timer_resume(self):
        self.timer.resume()

    def timer_pause(self):
        self.timer.pause()

    def timer_reset(self):
        self.timer.reset()

    def alarm_save(self, enabled: bool, time_str: str):
        return self.alarm.save(enabled, time_str)

    def alarm_stop(self):
        self.alarm.stop()

    def toggle_24h(self) -> bool:
        self.is24h = not self.is24h
        self.store.save(IS24H_KEY, self.is24h)
        self.publish()
        return self.is24h

    def toggle_celsius(self) -> bool:
        self.is_celsius = not self.is_celsius
        self.store.save(IS_CELSIUS_KEY, self.is_celsius)
        self.publish()
        return self.is_celsius

    def set_auto_mode(self, enabled: bool):
        self.modes.set_auto(enabled)
        self.publish()

    def update_temperature(self, reading: TemperatureReading):
        """Listener for the temperature feed; the core never fetches anything itself."""
        self.weather = reading
        self.publish()

    # --- rendering ---
    @property
    def ringing(self) -> bool:
        return self.alarm.ringing or self.timer.expired

    def mode_snapshot(self, mode: Mode, snapshot: ClockSnapshot) -> ModeSnapshot:
        if mode is Mode.TIME:
            text, meridiem = format_clock(snapshot.epoch_ms, self.is24h, self.tz)
            return ModeSnapshot(text, meridiem, "TIME")
        if mode is Mode.DATE:
            text, weekday = format_date(snapshot.epoch_ms, self.tz)
            return ModeSnapshot(text, weekday, "DATE")
        if mode is Mode.TEMP:
            return ModeSnapshot(self._temperature_text(), self._location_text(), "TEMP")
        if mode is Mode.STOPWATCH:
            phase = "RUN" if self.stopwatch.is_running else "PAUSE"
            return ModeSnapshot(format_stopwatch(self.stopwatch.state.elapsed_ms), phase, "STOPWATCH")
        if mode is Mode.TIMER:
            minutes, seconds = self.timer.display_parts()
            return ModeSnapshot(format_minutes_seconds(minutes, seconds), self.timer.phase(), "TIMER")
        return ModeSnapshot("--:--", "", "")

    def _temperature_text(self) -> str:
        celsius = self.weather.temperature_celsius
        if celsius is None:
            return "...°C"
        if self.is_celsius:
            return f"{celsius:.1f}°C"
        return f"{celsius * 1.8 + 32:.1f}°F"

    def _location_text(self) -> str:
        if self.weather.location_status == STATUS_OK:
            return self.weather.location_name
        return self.weather.location_status

    def display_state(self) -> DisplayState:
        snapshot = self.clock_tick.latest
        mode = self.modes.mode
        return DisplayState(
            mode=mode.name,
            snapshot=self.mode_snapshot(mode, snapshot),
            format_label="24H" if self.is24h else "12H",
            alarm_indicator=self.alarm.indicator(),
            ringing=self.ringing,
            alarm_ringing=self.alarm.ringing,
            timer_expired=self.timer.expired,
            auto_mode=self.modes.auto_enabled,
            epoch_ms=snapshot.epoch_ms,
            temperature_celsius=self.weather.temperature_celsius,
            location_status=self.weather.location_status,
        )

    def get_status(self) -> dict:
        return {
            "display": self.display_state().to_dict(),
            "stopwatch": self.stopwatch.get_status(),
            "timer": self.timer.get_status(),
            "alarm": self.alarm.get_status(),
            "is24h": self.is24h,
            "is_celsius": self.is_celsius,
        }
