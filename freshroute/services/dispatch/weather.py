"""
Weather providers for risk evaluation.

OpenWeatherProvider reads the OpenWeatherMap current-weather endpoint.
FixedWeatherProvider returns configured conditions and is used when no
API key is set.
"""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

import httpx

from freshroute.core.config import Settings, get_settings
from freshroute.services.dispatch.exceptions import WeatherUnavailableError
from freshroute.services.dispatch.geodesy import Coordinate
from freshroute.services.dispatch.risk import WeatherSnapshot

logger = logging.getLogger(__name__)

# OpenWeatherMap condition codes 2xx (thunderstorm), 3xx (drizzle), 5xx (rain)
_PRECIPITATION_CODES = range(200, 600)


def default_snapshot(settings: Optional[Settings] = None) -> WeatherSnapshot:
    """Conditions assumed when no weather data is available."""
    settings = settings or get_settings()
    return WeatherSnapshot(
        temperature_c=float(settings.default_ambient_temperature),
        is_raining=False,
        condition="Unknown",
    )


class WeatherProvider(ABC):
    """Abstract weather source."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider identifier."""

    @abstractmethod
    def get_weather(self, day: date, location: Coordinate) -> WeatherSnapshot:
        """Conditions at *location* on *day*.

        Raises:
            WeatherUnavailableError: If the source cannot answer.
        """


class FixedWeatherProvider(WeatherProvider):
    """Always returns the same conditions."""

    def __init__(self, snapshot: Optional[WeatherSnapshot] = None):
        self.snapshot = snapshot or default_snapshot()

    @property
    def provider_name(self) -> str:
        return "fixed"

    def get_weather(self, day: date, location: Coordinate) -> WeatherSnapshot:
        return self.snapshot


class OpenWeatherProvider(WeatherProvider):
    """
    OpenWeatherMap current-weather client.

    The free endpoint only reports current conditions, so *day* is not
    sent; batches are planned the evening before and today's weather is
    the best available proxy.

    API Documentation:
    https://openweathermap.org/current
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5/weather",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def provider_name(self) -> str:
        return "openweathermap"

    def get_weather(self, day: date, location: Coordinate) -> WeatherSnapshot:
        params = {
            "lat": str(location.latitude),
            "lon": str(location.longitude),
            "appid": self.api_key,
            "units": "metric",
        }

        try:
            response = self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise WeatherUnavailableError(f"OpenWeatherMap request failed: {e}") from e
        except ValueError as e:
            raise WeatherUnavailableError(f"OpenWeatherMap returned invalid JSON: {e}") from e

        try:
            temperature = float(data["main"]["temp"])
            conditions = data.get("weather") or [{}]
            code = int(conditions[0].get("id", 800))
            label = conditions[0].get("main", "Unknown")
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise WeatherUnavailableError(f"Failed to parse OpenWeatherMap response: {e}") from e

        snapshot = WeatherSnapshot(
            temperature_c=temperature,
            is_raining=code in _PRECIPITATION_CODES,
            condition=label,
        )
        logger.debug(
            f"Weather at ({location.latitude}, {location.longitude}): "
            f"{snapshot.temperature_c}°C, {snapshot.condition}"
        )
        return snapshot

    def close(self) -> None:
        self._client.close()


def get_weather_provider(settings: Optional[Settings] = None) -> WeatherProvider:
    """Return OpenWeatherMap when an API key is configured, else fixed conditions."""
    settings = settings or get_settings()

    if settings.openweather_api_key:
        logger.info("WeatherProvider: using OpenWeatherMap")
        return OpenWeatherProvider(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            timeout=settings.weather_timeout_seconds,
        )

    logger.warning("WeatherProvider: no OpenWeatherMap key, using fixed conditions")
    return FixedWeatherProvider(default_snapshot(settings))
