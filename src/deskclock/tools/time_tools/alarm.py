"""
Single daily alarm.

The alarm is compared once per clock tick at minute granularity. It rings on
the first tick inside the matching minute and stays ringing (without
re-triggering on the remaining ticks of that minute) until it is stopped or
silences itself after ALARM_RING_S seconds.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from deskclock.core.snapshot import ClockSnapshot
from deskclock.ports.scheduler_port import Scheduler
from deskclock.ports.store_port import PersistentStore
from deskclock.utils import Event
from deskclock.utils.clock_format import hhmm, parse_hhmm
from deskclock.utils.config import ALARM_RING_S
from deskclock.utils.custom_exception import InvalidAlarmTimeError
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

STORE_KEY = "alarm"
DEFAULT_TIME = "07:30"


class AlarmStatus(Enum):
    IDLE = "idle"
    ARMED = "armed"
    RINGING = "ringing"


@dataclass(frozen=True)
class AlarmConfig:
    enabled: bool = False
    time: str = DEFAULT_TIME

    def to_dict(self):
        return asdict(self)


def _config_from_payload(payload) -> AlarmConfig:
    if not isinstance(payload, dict):
        raise InvalidAlarmTimeError(f"Alarm payload must be an object, got {payload!r}")
    hour, minute = parse_hhmm(payload.get("time"))
    return AlarmConfig(enabled=bool(payload.get("enabled", False)), time=f"{hour:02}:{minute:02}")


class AlarmScheduler:
    def __init__(self, store: PersistentStore, scheduler: Scheduler, tz=None):
        self.store = store
        self.scheduler = scheduler
        self.tz = tz
        self.config = self._load_config()
        self.ringing = False
        self._silence_handle = None
        # minute explicitly stopped by the user, so it does not ring again on the next tick
        self._silenced_minute: Optional[str] = None

        self.on_fired = Event("alarm.on_fired")
        self.on_silenced = Event("alarm.on_silenced")
        self.on_change = Event("alarm.on_change")

    def _load_config(self) -> AlarmConfig:
        payload = self.store.load(STORE_KEY, AlarmConfig().to_dict())
        try:
            return _config_from_payload(payload)
        except InvalidAlarmTimeError:
            logger.warning(f"Ignoring malformed stored alarm {payload!r}, using defaults.")
            return AlarmConfig()

    @property
    def status(self) -> AlarmStatus:
        if self.ringing:
            return AlarmStatus.RINGING
        if self.config.enabled:
            return AlarmStatus.ARMED
        return AlarmStatus.IDLE

    def check(self, snapshot: ClockSnapshot):
        """Called on every clock tick with the same reading the display renders."""
        current = hhmm(snapshot.epoch_ms, self.tz)
        if self._silenced_minute is not None and current != self._silenced_minute:
            self._silenced_minute = None

        if not self.config.enabled or self.ringing:
            return
        if current == self.config.time and current != self._silenced_minute:
            self._ring()

    def _ring(self):
        self.ringing = True
        self._cancel_silence()
        self._silence_handle = self.scheduler.call_later(ALARM_RING_S, self._auto_silence)
        logger.info(f"Alarm fired at {self.config.time}.")
        self.on_fired.emit(time=self.config.time)

    def _auto_silence(self):
        self._silence_handle = None
        if not self.ringing:
            return
        self.ringing = False
        logger.info("Alarm silenced automatically.")
        self.on_silenced.emit(reason="timeout")

    def _cancel_silence(self):
        if self._silence_handle is not None:
            self._silence_handle.cancel()
            self._silence_handle = None

    def stop(self):
        """Stops a ringing alarm. The alarm stays armed for the next day."""
        if not self.ringing:
            return
        self._cancel_silence()
        self.ringing = False
        self._silenced_minute = self.config.time
        logger.info("Alarm stopped.")
        self.on_silenced.emit(reason="stopped")

    def save(self, enabled: bool, time_str: str) -> AlarmConfig:
        """
        Replaces the alarm configuration and persists it.

        Raises:
            InvalidAlarmTimeError: If `time_str` is not a 24h "HH:MM" value.
        """
        hour, minute = parse_hhmm(time_str)
        self.config = AlarmConfig(enabled=bool(enabled), time=f"{hour:02}:{minute:02}")
        self._silenced_minute = None
        if not self.config.enabled and self.ringing:
            self._cancel_silence()
            self.ringing = False
            self.on_silenced.emit(reason="disabled")
        if not self.store.save(STORE_KEY, self.config.to_dict()):
            logger.warning("Alarm configuration kept in memory only.")
        logger.info(f"Alarm {'set for ' + self.config.time if self.config.enabled else 'disabled'}.")
        self.on_change.emit(config=self.config)
        return self.config

    def indicator(self) -> str:
        return f"AL: {self.config.time}" if self.config.enabled else "AL: OFF"

    def shutdown(self):
        self._cancel_silence()

    def get_status(self):
        return {
            "status": self.status.value,
            "enabled": self.config.enabled,
            "time": self.config.time,
            "ringing": self.ringing,
        }
