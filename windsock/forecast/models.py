"""Forecast grid data models.

Weather snapshots are frozen pydantic models so that two snapshots compare
equal by value; the grid structures built from them are frozen dataclasses.
Everything here is built once per generation run and never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from pydantic import BaseModel, ConfigDict

from windsock.climbs import Climb
from windsock.forecast.slugs import slugify

MS_TO_KMH = 3600.0 / 1000.0

_COMPASS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def direction(bearing: float) -> str:
    """Return the 16-point compass name for a bearing in degrees."""
    return _COMPASS[int(math.floor((bearing % 360) / 22.5 + 0.5)) % 16]


class Conditions(BaseModel):
    """One hourly weather snapshot.

    ``wind_bearing`` is the direction the wind blows from, ``humidity`` and
    ``precip_probability`` are fractions in [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    time: datetime | None = None
    temperature: float = 15.0  # °C
    humidity: float = 0.0
    pressure: float = 1013.25  # hPa
    air_density: float = 1.225  # kg/m³
    wind_speed: float = 0.0  # m/s
    wind_gust: float = 0.0  # m/s
    wind_bearing: float = 0.0  # degrees
    precip_probability: float = 0.0
    precip_intensity: float = 0.0  # mm/h
    cloud_cover: float = 0.0

    def wind(self) -> str:
        return f"{self.wind_speed * MS_TO_KMH:.1f} km/h {direction(self.wind_bearing)}"

    def precip(self) -> str:
        return f"{self.precip_probability * 100:.0f}% ({self.precip_intensity:.1f} mm/h)"


def weather_string(c: Conditions) -> str:
    precip = ""
    if c.precip_probability > 0.1:
        precip = f"\n{c.precip()}"
    return f"{c.temperature:.1f}°C ({c.air_density:.3f} kg/m³){precip}\n{c.wind()}"


def clock(local_time: datetime) -> str:
    """Format the hour as e.g. ``3PM``."""
    hour = local_time.hour % 12 or 12
    return f"{hour}{'AM' if local_time.hour < 12 else 'PM'}"


def day_time(local_time: datetime) -> str:
    return f"{local_time:%A} {clock(local_time)}"


def full_time(local_time: datetime) -> str:
    return f"{local_time:%Y-%m-%d %H:%M}"


def disambiguated_day(local_time: datetime) -> str:
    """Weekday plus day of month, distinct across an eight day span."""
    return f"{local_time:%A} {local_time.day}"


def display_score(score: float) -> str:
    return f"{(score - 1) * 100:.2f}%"


def rank(score: float) -> int:
    """Bucket a score into -5..5, positive when conditions are favorable."""
    mod = -1 if score > 1.0 else 1
    r = int(abs(score - 1) * 100)
    if r < 1:
        r = 0
    elif r < 3:
        r = 1
    elif r < 6:
        r = 2
    elif r < 10:
        r = 3
    elif r < 15:
        r = 4
    else:
        r = 5
    return mod * r


@dataclass(frozen=True)
class GenerationContext:
    """Explicit per-run context threaded through grid construction.

    Attributes:
        now: Generation instant (timezone aware)
        timezone: Zone used to localize forecast timestamps
        min_hour: First local hour of the daily window (inclusive)
        max_hour: Last local hour of the daily window (inclusive)
    """

    now: datetime
    timezone: tzinfo
    min_hour: int = 6
    max_hour: int = 18

    def __post_init__(self) -> None:
        if self.min_hour < 0 or self.max_hour > 23 or self.min_hour >= self.max_hour:
            raise ValueError(
                "min and max must be in the range [0-23] with min < max "
                f"but got min={self.min_hour} max={self.max_hour}"
            )

    @property
    def hours(self) -> int:
        """Number of hour slots in each day bucket."""
        return self.max_hour - self.min_hour + 1

    def localize(self, t: datetime) -> datetime:
        return t.astimezone(self.timezone)

    def in_window(self, local_time: datetime) -> bool:
        return self.min_hour <= local_time.hour <= self.max_hour


@dataclass(frozen=True)
class ScoredCondition:
    """A snapshot with its local time and both performance scores.

    Lower scores are more favorable and 1.0 is neutral. ``historical`` is None
    when no long-run average exists for the climb at that month and hour.
    """

    conditions: Conditions
    local_time: datetime
    baseline: float
    historical: float | None = None

    def value(self, historical: bool) -> float | None:
        return self.historical if historical else self.baseline

    def score(self, historical: bool) -> str:
        s = self.value(historical)
        return "" if s is None else display_score(s)

    def rank(self, historical: bool) -> int:
        s = self.value(historical)
        return 0 if s is None else rank(s)

    def weather(self) -> str:
        return weather_string(self.conditions)

    def day(self) -> str:
        return f"{self.local_time:%A}"

    def disambiguated_day(self) -> str:
        return disambiguated_day(self.local_time)

    def day_time(self) -> str:
        return day_time(self.local_time)

    def day_time_slug(self) -> str:
        return slugify(self.day_time())

    def full_time(self) -> str:
        return full_time(self.local_time)


@dataclass(frozen=True)
class DayBucket:
    """One local day of the grid; ``None`` slots have no forecast data."""

    day: str
    key: str
    conditions: tuple[ScoredCondition | None, ...]

    @property
    def short_day(self) -> str:
        return self.day[:3]


@dataclass(frozen=True)
class ClimbGrid:
    """Scored day/hour grid for one climb.

    The best pointers never reference the current cell, even when it sits in
    the grid at its natural position.
    """

    climb: Climb
    current: ScoredCondition | None = None
    days: tuple[DayBucket, ...] = field(default_factory=tuple)
    best_baseline: ScoredCondition | None = None
    best_historical: ScoredCondition | None = None

    def best(self, historical: bool) -> ScoredCondition | None:
        return self.best_historical if historical else self.best_baseline

    def is_current(self, cell: ScoredCondition | None) -> bool:
        return cell is not None and self.current is not None and cell.conditions == self.current.conditions

    def current_position(self) -> tuple[int, int] | None:
        """Return (day, hour slot) of the current cell when it is in the grid."""
        for j, day in enumerate(self.days):
            for k, cell in enumerate(day.conditions):
                if self.is_current(cell):
                    return j, k
        return None

    @property
    def slug(self) -> str:
        return slugify(self.climb.name)


@dataclass(frozen=True)
class Navigation:
    """Links to neighbouring pages; empty strings mean no page in that direction."""

    up: str = ""
    down: str = ""
    left: str = ""
    right: str = ""
