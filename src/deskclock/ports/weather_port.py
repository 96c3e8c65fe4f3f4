from abc import ABC, abstractmethod
from typing import Optional, Tuple


class LocationNotFoundError(Exception):
    """Raised when a configured place name cannot be resolved to coordinates."""
    pass


class WeatherServicePort(ABC):
    @abstractmethod
    def locate(self, place: str) -> Tuple[float, float, str]:
        """Resolve a place name to (latitude, longitude, display name)."""
        pass

    @abstractmethod
    def location_name(self, latitude: float, longitude: float) -> Optional[str]:
        """Reverse geocode coordinates into a short place name."""
        pass

    @abstractmethod
    def current_temperature(self, latitude: float, longitude: float) -> Optional[float]:
        """Current temperature in Celsius, or None when the service has no reading."""
        pass
