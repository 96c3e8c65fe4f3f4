import os
from dataclasses import dataclass
from typing import Optional

import dotenv

CLOCK_TICK_S = 1.0
STOPWATCH_TICK_S = 0.1
TIMER_TICK_S = 0.25
ALARM_RING_S = 60.0
TIMER_FLASH_S = 5.0
AUTO_CYCLE_S = 5.0
WEATHER_REFRESH_S = 600.0


@dataclass
class Settings:
    db_path: str = os.path.join(os.getcwd(), "deskclock.db")
    timezone: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    weather_refresh_s: float = WEATHER_REFRESH_S
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def has_location(self) -> bool:
        return bool(self.location) or (self.latitude is not None and self.longitude is not None)


def _optional_float(value):
    if value in (None, ""):
        return None
    return float(value)

def load_settings(env_file: Optional[str] = None) -> Settings:
    """Builds Settings from DESKCLOCK_* environment variables, reading a .env file first."""
    dotenv.load_dotenv(env_file)
    defaults = Settings()
    return Settings(
        db_path=os.getenv("DESKCLOCK_DB_PATH") or defaults.db_path,
        timezone=os.getenv("DESKCLOCK_TIMEZONE") or None,
        location=os.getenv("DESKCLOCK_LOCATION") or None,
        latitude=_optional_float(os.getenv("DESKCLOCK_LATITUDE")),
        longitude=_optional_float(os.getenv("DESKCLOCK_LONGITUDE")),
        weather_refresh_s=float(os.getenv("DESKCLOCK_WEATHER_REFRESH_S") or defaults.weather_refresh_s),
        host=os.getenv("DESKCLOCK_HOST") or defaults.host,
        port=int(os.getenv("DESKCLOCK_PORT") or defaults.port),
    )
