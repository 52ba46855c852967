"""Root conftest for all tests.

Shared factories for climbs, synthetic hourly forecasts and a deterministic
scoring oracle.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from windsock.climbs import Climb, LatLng, Segment
from windsock.forecast.models import Conditions, GenerationContext

LOS_ANGELES = ZoneInfo("America/Los_Angeles")


def _hourly(start_local: datetime, hours: int, wind: dict[int, float] | None = None) -> list[Conditions]:
    """Consecutive hourly snapshots from ``start_local``; ``wind`` overrides wind speed by index."""
    wind = wind or {}
    start = start_local.astimezone(timezone.utc)
    return [
        Conditions(
            time=start + timedelta(hours=i),
            temperature=12.0 + (i % 24) / 4,
            wind_speed=wind.get(i, 3.0 + (i % 5)),
            wind_bearing=270.0,
        )
        for i in range(hours)
    ]


def _climb(
    name: str,
    aliases: tuple[str, ...] = (),
    segment_name: str | None = None,
    segment_id: int = 1,
) -> Climb:
    return Climb(
        name=name,
        aliases=aliases,
        segment=Segment(
            id=segment_id,
            name=segment_name or name,
            distance=4800.0,
            average_grade=0.07,
            median_elevation=300.0,
            average_location=LatLng(lat=37.38, lng=-122.26),
            average_direction=230.0,
        ),
    )


def _oracle(segment: Segment, current: Conditions, past: Conditions | None) -> tuple[float, float]:
    """Wind speed drives the score: 1% per m/s, relative to ``past`` for historical."""
    baseline = 1.0 + current.wind_speed / 100
    historical = 1.0 + (current.wind_speed - past.wind_speed) / 100 if past is not None else 0.0
    return baseline, historical


class StaticLookup:
    """Historical lookup returning one average for every month and hour in ``hours``."""

    def __init__(self, average: Conditions, hours: set[int] | None = None) -> None:
        self.average = average
        self.hours = hours
        self.calls: list[tuple[int, int, int]] = []

    def get(self, segment_id: int, month: int, hour: int) -> Conditions | None:
        self.calls.append((segment_id, month, hour))
        if self.hours is not None and hour not in self.hours:
            return None
        return self.average


@pytest.fixture
def tz():
    return LOS_ANGELES


@pytest.fixture
def make_hourly():
    return _hourly


@pytest.fixture
def make_climb():
    return _climb


@pytest.fixture
def oracle():
    return _oracle


@pytest.fixture
def static_lookup():
    return StaticLookup


@pytest.fixture
def ctx():
    """Three slot window (6AM-8AM) in Los Angeles."""
    return GenerationContext(
        now=datetime(2024, 6, 3, 7, 0, tzinfo=LOS_ANGELES),
        timezone=LOS_ANGELES,
        min_hour=6,
        max_hour=8,
    )


@pytest.fixture
def eight_day_hourly(make_hourly):
    """168 hours from Monday 2024-06-03 07:00 to Monday 2024-06-10 06:00 local."""
    return make_hourly(datetime(2024, 6, 3, 7, 0, tzinfo=LOS_ANGELES), 168)


@pytest.fixture
def seven_day_hourly(make_hourly):
    """168 hours starting after the window closes, giving seven full days."""
    return make_hourly(datetime(2024, 6, 3, 9, 0, tzinfo=LOS_ANGELES), 168)
