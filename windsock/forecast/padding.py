"""Pad partial boundary days and enforce the grid shape invariants.

The forecast window usually starts and ends mid-day. The first day is padded
at the front (its cells keep the latest slots), the last day at the back.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from windsock.forecast.errors import GridValidationError
from windsock.forecast.windowing import RawDay

MIN_DAYS = 7
MAX_DAYS = 8


def pad_days(days: Sequence[RawDay], hours: int) -> list[RawDay]:
    """Return the days with the first and last bucket padded to ``hours`` cells.

    Args:
        days: Day buckets in chronological order
        hours: Width of a full day

    Returns:
        New list of day buckets; the input is left untouched
    """
    padded = list(days)
    if not padded:
        return padded

    first = padded[0]
    missing = hours - len(first.cells)
    if missing > 0:
        padded[0] = RawDay(day=first.day, key=first.key, cells=[None] * missing + first.cells)

    if len(padded) > 1:
        last = padded[-1]
        missing = hours - len(last.cells)
        if missing > 0:
            padded[-1] = RawDay(day=last.day, key=last.key, cells=last.cells + [None] * missing)

    return padded


def validate_days(climb: str, days: Sequence[RawDay], hours: int) -> None:
    """Check the day count and per-day width of a padded grid.

    Raises:
        GridValidationError: If there are not 7 or 8 days, or a day is not
            exactly ``hours`` wide
    """
    cells = [len(d.cells) for d in days]
    if not MIN_DAYS <= len(days) <= MAX_DAYS:
        raise GridValidationError(
            f"expected 8 (/7) days worth of data and got {len(days)}",
            climb=climb,
            days=len(days),
            cells=cells,
        )
    for d in days:
        if len(d.cells) != hours:
            raise GridValidationError(
                f"expected each day to have {hours} hours of data but {d.day} had {len(d.cells)}",
                climb=climb,
                days=len(days),
                cells=cells,
            )
    logger.debug("Grid shape validated", climb=climb, days=len(days), hours=hours)
