"""Per-climb grid construction: bucket, pad, validate, score."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from windsock.climbs import Climb
from windsock.forecast.models import ClimbGrid, Conditions, GenerationContext
from windsock.forecast.padding import pad_days, validate_days
from windsock.forecast.scoring import HistoricalLookup, ScoringOracle, score_days
from windsock.forecast.windowing import bucket_forecast


def build_climb_grid(
    climb: Climb,
    hourly: Sequence[Conditions],
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None = None,
) -> ClimbGrid:
    """Build the scored, validated grid for one climb.

    An empty forecast yields an empty grid with no current cell.

    Args:
        climb: Climb being forecast
        hourly: Chronological hourly snapshots, element 0 being "now"
        ctx: Generation context
        oracle: Scoring function
        lookup: Historical averages; None disables historical scoring

    Returns:
        ClimbGrid for the climb

    Raises:
        GridValidationError: If the padded grid has the wrong shape
        ScoringError: If the oracle fails for any cell
    """
    window = bucket_forecast(hourly, ctx)
    if window.current is None:
        logger.info("Empty forecast, building empty grid", climb=climb.name)
        return ClimbGrid(climb=climb)

    days = pad_days(window.days, ctx.hours)
    validate_days(climb.name, days, ctx.hours)

    scored = score_days(climb, days, window.current, ctx, oracle, lookup)
    grid = ClimbGrid(
        climb=climb,
        current=scored.current,
        days=scored.days,
        best_baseline=scored.best_baseline,
        best_historical=scored.best_historical,
    )
    logger.info(
        "Built climb grid",
        climb=climb.name,
        days=len(grid.days),
        current_in_window=window.current_in_window,
    )
    return grid
