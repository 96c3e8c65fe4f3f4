import requests

from deskclock.ports.weather_port import LocationNotFoundError, WeatherServicePort

GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"
REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


class OpenMeteoAdapter(WeatherServicePort):
    def __init__(self, timeout=10, user_agent="deskclock/0.1"):
        self.timeout = timeout
        self.session = requests.Session()
        # Nominatim rejects anonymous clients
        self.session.headers.update({"User-Agent": user_agent})

    def _get_json(self, url, params):
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def locate(self, place: str):
        data = self._get_json(GEOCODE_URL, {"name": place, "count": 1})
        results = data.get("results")
        if not results:
            raise LocationNotFoundError(f"Location '{place}' not found")
        first = results[0]
        return first["latitude"], first["longitude"], first.get("name") or place

    def location_name(self, latitude: float, longitude: float):
        data = self._get_json(REVERSE_URL, {
            "format": "json", "lat": latitude, "lon": longitude,
            "zoom": 10, "addressdetails": 1,
        })
        address = data.get("address") or {}
        for field in ("city", "town", "village", "state", "country"):
            if address.get(field):
                return address[field]
        display_name = data.get("display_name") or ""
        short = ", ".join(part.strip() for part in display_name.split(",")[:2]).strip()
        return short or None

    def current_temperature(self, latitude: float, longitude: float):
        data = self._get_json(FORECAST_URL, {
            "latitude": latitude, "longitude": longitude,
            "current_weather": "true", "temperature_unit": "celsius",
        })
        current = data.get("current_weather") or {}
        temperature = current.get("temperature")
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            return None
        return float(temperature)
