"""Bucket a chronological hourly forecast into local days.

Only hours inside the configured daily window are kept. Days are split on the
weekday plus day-of-month key rather than the weekday name, since an eight day
span observed at a fixed hour can see the same weekday twice.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from windsock.forecast.errors import ForecastUnavailableError
from windsock.forecast.models import Conditions, GenerationContext, disambiguated_day


@dataclass
class RawDay:
    """An unscored day bucket; ``None`` cells are padding."""

    day: str
    key: str
    cells: list[Conditions | None] = field(default_factory=list)


@dataclass(frozen=True)
class Window:
    """Result of bucketing a forecast.

    Attributes:
        days: Day buckets in chronological order
        current: First snapshot of the forecast, or None for an empty forecast
        current_in_window: Whether the current snapshot also sits in ``days``
    """

    days: tuple[RawDay, ...] = ()
    current: Conditions | None = None
    current_in_window: bool = False


def bucket_forecast(hourly: Sequence[Conditions], ctx: GenerationContext) -> Window:
    """Group hourly snapshots into day buckets confined to the hour window.

    Args:
        hourly: Chronologically ordered snapshots; element 0 is "now"
        ctx: Generation context holding the time zone and hour window

    Returns:
        Window with the day buckets and the current snapshot

    Raises:
        ForecastUnavailableError: If a snapshot carries no time
    """
    if not hourly:
        return Window()
    if any(c.time is None for c in hourly):
        raise ForecastUnavailableError("forecast snapshot has no time")

    current = hourly[0]
    days: list[RawDay] = []
    open_day: RawDay | None = None
    for conditions in hourly:
        local = ctx.localize(conditions.time)
        if not ctx.in_window(local):
            continue

        key = disambiguated_day(local)
        if open_day is None or key != open_day.key:
            if open_day is not None:
                days.append(open_day)
            open_day = RawDay(day=f"{local:%A}", key=key)
        open_day.cells.append(conditions)

    if open_day is not None:
        days.append(open_day)

    current_in_window = ctx.in_window(ctx.localize(current.time))
    logger.debug(f"Bucketed {len(hourly)} hourly snapshots into {len(days)} days")
    return Window(days=tuple(days), current=current, current_in_window=current_in_window)
