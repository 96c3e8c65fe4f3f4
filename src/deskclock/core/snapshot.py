from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class ClockSnapshot:
    """One wall-clock reading, shared by everything that reacts to the same tick."""
    epoch_ms: int


@dataclass(frozen=True)
class ModeSnapshot:
    primary_text: str
    secondary_text: str
    mode_label: str


@dataclass(frozen=True)
class DisplayState:
    """Everything a renderer needs for one frame."""
    mode: str
    snapshot: ModeSnapshot
    format_label: str
    alarm_indicator: str
    ringing: bool
    alarm_ringing: bool
    timer_expired: bool
    auto_mode: bool
    epoch_ms: int
    temperature_celsius: Optional[float] = None
    location_status: str = ""

    def to_dict(self):
        return asdict(self)
