import asyncio
from dataclasses import dataclass
from typing import Optional

import requests

from deskclock.ports.scheduler_port import Scheduler
from deskclock.ports.weather_port import LocationNotFoundError, WeatherServicePort
from deskclock.utils import Event
from deskclock.utils.config import Settings
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

FALLBACK_TEMPERATURE_C = 25.0
DEFAULT_LOCATION_NAME = "Current location"
UNAVAILABLE_LOCATION_NAME = "Location unavailable"

STATUS_SEARCHING = "SEARCHING..."
STATUS_OK = "OK"
STATUS_NO_LOCATION = "NO LOCATION"
STATUS_BLOCKED = "BLOCKED"

# errors a weather service call may raise; anything else is a bug and propagates
_SERVICE_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError)


@dataclass(frozen=True)
class TemperatureReading:
    temperature_celsius: Optional[float]
    location_status: str
    location_name: str


SEARCHING = TemperatureReading(None, STATUS_SEARCHING, DEFAULT_LOCATION_NAME)


class TemperatureFeed:
    """
    Periodically fetches the outdoor temperature for the configured location.

    The network calls run in the default executor so they never share the
    clock's update path; the result is published on the event loop through
    `on_update`. Every failure degrades to FALLBACK_TEMPERATURE_C.
    """
    def __init__(self, service: WeatherServicePort, settings: Settings, scheduler: Scheduler,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.service = service
        self.settings = settings
        self.scheduler = scheduler
        self.loop = loop
        self.reading = SEARCHING
        self.on_update = Event("temperature.on_update")
        self._handle = None
        self._in_flight = False

    def start(self):
        self.refresh()
        if self._handle is None:
            self._handle = self.scheduler.call_every(self.settings.weather_refresh_s, self.refresh)

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def refresh(self):
        if not self.settings.has_location:
            self._publish(self.fetch())
            return
        if self._in_flight:
            logger.debug("Temperature refresh already in progress.")
            return
        self._in_flight = True
        self._publish(SEARCHING)
        loop = self.loop or asyncio.get_running_loop()
        future = loop.run_in_executor(None, self.fetch)
        future.add_done_callback(self._on_fetched)

    def _on_fetched(self, future):
        self._in_flight = False
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Temperature refresh crashed: {error!r}")
            self._publish(TemperatureReading(FALLBACK_TEMPERATURE_C, STATUS_OK, DEFAULT_LOCATION_NAME))
            return
        self._publish(future.result())

    def _publish(self, reading: TemperatureReading):
        self.reading = reading
        self.on_update.emit(reading)

    def fetch(self) -> TemperatureReading:
        """Blocking two-step lookup: resolve the location, then read the temperature."""
        if not self.settings.has_location:
            return TemperatureReading(FALLBACK_TEMPERATURE_C, STATUS_NO_LOCATION, UNAVAILABLE_LOCATION_NAME)

        name = None
        try:
            if self.settings.latitude is not None and self.settings.longitude is not None:
                latitude, longitude = self.settings.latitude, self.settings.longitude
            else:
                latitude, longitude, name = self.service.locate(self.settings.location)
        except (LocationNotFoundError,) + _SERVICE_ERRORS as e:
            logger.warning(f"Could not resolve location: {e}")
            return TemperatureReading(FALLBACK_TEMPERATURE_C, STATUS_BLOCKED, UNAVAILABLE_LOCATION_NAME)

        if name is None:
            try:
                name = self.service.location_name(latitude, longitude)
            except _SERVICE_ERRORS as e:
                logger.error(f"Error fetching location name: {e}")
            name = name or DEFAULT_LOCATION_NAME

        try:
            temperature = self.service.current_temperature(latitude, longitude)
        except _SERVICE_ERRORS as e:
            logger.error(f"Error fetching temperature: {e}")
            temperature = None
        if temperature is None:
            temperature = FALLBACK_TEMPERATURE_C

        return TemperatureReading(temperature, STATUS_OK, name)
