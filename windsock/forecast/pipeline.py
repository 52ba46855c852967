"""Generate a linked site from a climb registry.

Per-climb work (forecast fetch, bucketing, padding, scoring) runs on a thread
pool. Results are gathered back into input order before any linking happens,
since navigation needs every surviving grid and a stable climb order.
"""

from __future__ import annotations

import concurrent.futures
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from windsock.climbs import Climb, ClimbRegistry
from windsock.core.logger import climb_context
from windsock.forecast.errors import ForecastUnavailableError, GridValidationError, ScoringError
from windsock.forecast.grid import build_climb_grid
from windsock.forecast.models import ClimbGrid, Conditions, GenerationContext
from windsock.forecast.pages import ClimbFailure, Site, SiteOptions, assemble_site
from windsock.forecast.scoring import HistoricalLookup, ScoringOracle

ForecastProvider = Callable[[Climb], Sequence[Conditions]]

# Failures that only take the affected climb out of the site.
CLIMB_ERRORS = (ForecastUnavailableError, GridValidationError, ScoringError)


@dataclass(frozen=True)
class GridOutcome:
    climb: Climb
    grid: ClimbGrid | None = None
    error: Exception | None = None


def _build_one(
    climb: Climb,
    forecast: ForecastProvider,
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None,
) -> GridOutcome:
    with climb_context(climb.name):
        try:
            hourly = forecast(climb)
            return GridOutcome(climb=climb, grid=build_climb_grid(climb, hourly, ctx, oracle, lookup))
        except CLIMB_ERRORS as e:
            logger.error(f"Excluding climb {climb.name}: {e}")
            return GridOutcome(climb=climb, error=e)


def build_grids(
    climbs: Sequence[Climb],
    forecast: ForecastProvider,
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None = None,
    max_workers: int = 8,
) -> list[GridOutcome]:
    """Build every climb's grid concurrently, returned in input order."""
    if not climbs:
        return []
    workers = max(1, min(max_workers, len(climbs)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_build_one, climb, forecast, ctx, oracle, lookup) for climb in climbs]
        return [f.result() for f in futures]


def generate_site(
    registry: ClimbRegistry,
    forecast: ForecastProvider,
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None = None,
    options: SiteOptions | None = None,
    max_workers: int = 8,
) -> Site:
    """Build, link and alias-resolve the site for every registered climb.

    Climbs whose forecast, grid shape or scoring fails are listed in
    ``Site.failures`` and left out; the visible count shrinks accordingly.
    Any other exception propagates unchanged.
    """
    options = options or SiteOptions()
    outcomes = build_grids(registry.climbs, forecast, ctx, oracle, lookup, max_workers)

    grids: list[ClimbGrid] = []
    failures: list[ClimbFailure] = []
    hidden = 0
    for k, outcome in enumerate(outcomes):
        if outcome.grid is None:
            failures.append(ClimbFailure(climb=outcome.climb.name, error=str(outcome.error)))
            continue
        grids.append(outcome.grid)
        if k < registry.hidden:
            hidden += 1

    site = assemble_site(grids, hidden, ctx, options, lookup, failures)
    logger.info(
        "Assembled site",
        climbs=len(grids),
        visible=hidden,
        pages=len(site.pages),
        aliases=len(site.aliases),
        failures=len(failures),
    )
    return site
