"""Weather API client for fetching hourly forecasts.

Uses the Open-Meteo forecast API (free, no API key). Each forecast is trimmed
so that element 0 is the snapshot for the hour containing ``now``.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import httpx
from loguru import logger

from windsock.climbs import Climb, LatLng
from windsock.config.settings import settings
from windsock.forecast.errors import ForecastUnavailableError
from windsock.forecast.models import Conditions

_HOURLY = (
    "temperature_2m,relative_humidity_2m,surface_pressure,wind_speed_10m,"
    "wind_direction_10m,wind_gusts_10m,precipitation_probability,precipitation,cloud_cover"
)
_FORECAST_DAYS = 8
# Hours after the current one kept from the response.
_HORIZON_HOURS = 168
_JITTER_FACTOR = 0.5

_RD = 287.058  # J/(kg·K), dry air
_RV = 461.495  # J/(kg·K), water vapour


def air_density(temperature_c: float, pressure_hpa: float, humidity: float) -> float:
    """Density of moist air (kg/m³) from temperature, pressure and relative humidity (0-1)."""
    t = temperature_c + 273.15
    saturation = 6.1078 * 10 ** (7.5 * temperature_c / (temperature_c + 237.3))
    pv = humidity * saturation * 100
    pd = pressure_hpa * 100 - pv
    return pd / (_RD * t) + pv / (_RV * t)


def _parse_hourly(hourly: dict, now: datetime) -> list[Conditions]:
    times = hourly.get("time")
    if not times or not isinstance(times, list):
        return []

    def _at(name: str, i: int, default: float = 0.0) -> float:
        arr = hourly.get(name)
        if not isinstance(arr, list) or i >= len(arr) or arr[i] is None:
            return default
        return float(arr[i])

    start = now.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)
    out = []
    for i, ts in enumerate(times):
        t = datetime.fromtimestamp(int(ts), tz=timezone.utc)
        if t < start:
            continue
        temperature = _at("temperature_2m", i, 15.0)
        humidity = _at("relative_humidity_2m", i) / 100
        pressure = _at("surface_pressure", i, 1013.25)
        out.append(
            Conditions(
                time=t,
                temperature=temperature,
                humidity=humidity,
                pressure=pressure,
                air_density=air_density(temperature, pressure, humidity),
                wind_speed=_at("wind_speed_10m", i),
                wind_gust=_at("wind_gusts_10m", i),
                wind_bearing=_at("wind_direction_10m", i),
                precip_probability=_at("precipitation_probability", i) / 100,
                precip_intensity=_at("precipitation", i),
                cloud_cover=_at("cloud_cover", i) / 100,
            )
        )
        if len(out) > _HORIZON_HOURS:
            break
    return out


class WeatherClient:
    """Client for fetching hourly forecasts with retry and backoff."""

    def __init__(
        self,
        base_url: str | None = None,
        max_attempts: int | None = None,
        base_backoff: float | None = None,
        max_backoff: float | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url or settings.open_meteo_forecast_url
        self.max_attempts = max_attempts or settings.forecast_max_attempts
        self.base_backoff = settings.forecast_base_backoff if base_backoff is None else base_backoff
        self.max_backoff = settings.forecast_max_backoff if max_backoff is None else max_backoff
        self.timeout = timeout or settings.forecast_timeout

    def _backoff(self, attempt: int) -> float:
        jitter = 1 + (random.random() - 0.5) * _JITTER_FACTOR
        return min(self.base_backoff * (2**attempt) * jitter, self.max_backoff)

    def _fetch(self, location: LatLng) -> dict:
        params = {
            "latitude": location.lat,
            "longitude": location.lng,
            "hourly": _HOURLY,
            "wind_speed_unit": "ms",
            "timeformat": "unixtime",
            "timezone": "GMT",
            "forecast_days": _FORECAST_DAYS,
        }
        last_error: Exception | None = None
        for attempt in range(self.max_attempts):
            try:
                response = httpx.get(self.base_url, params=params, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as e:
                last_error = e
                logger.warning(
                    f"Forecast request failed for {location.lat}, {location.lng} "
                    f"(attempt {attempt + 1}/{self.max_attempts}): {e}"
                )
                if attempt + 1 < self.max_attempts:
                    time.sleep(self._backoff(attempt + 1))

        raise ForecastUnavailableError(
            f"Forecast unavailable for {location.lat}, {location.lng} after {self.max_attempts} attempts"
        ) from last_error

    def forecast(self, location: LatLng, now: datetime) -> list[Conditions]:
        """Fetch the hourly forecast starting at the hour containing ``now``.

        Args:
            location: Point to forecast
            now: Generation instant

        Returns:
            Chronological hourly conditions; element 0 is "current", followed by at
            most a week of hours. Empty when the provider returned no hourly data.

        Raises:
            ForecastUnavailableError: If every attempt failed
        """
        data = self._fetch(location)
        hourly = data.get("hourly")
        if not hourly or not isinstance(hourly, dict):
            logger.warning(f"No hourly data in forecast response for {location.lat}, {location.lng}")
            return []
        return _parse_hourly(hourly, now)

    def provider(self, now: datetime) -> Callable[[Climb], Sequence[Conditions]]:
        """Bind ``now`` and return a per-climb forecast function."""

        def forecast_climb(climb: Climb) -> Sequence[Conditions]:
            return self.forecast(climb.segment.location(), now)

        return forecast_climb


def get_weather_client() -> WeatherClient:
    """Get a configured weather client instance."""
    return WeatherClient()
