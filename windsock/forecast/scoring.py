"""Score grid cells and track the best plannable cell per convention.

The scoring function itself is an external oracle. A failure for any cell
aborts the whole climb.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from windsock.climbs import Climb, Segment
from windsock.forecast.errors import ScoringError
from windsock.forecast.models import Conditions, DayBucket, GenerationContext, ScoredCondition, full_time
from windsock.forecast.windowing import RawDay


class ScoringOracle(Protocol):
    def __call__(
        self,
        segment: Segment,
        current: Conditions,
        past: Conditions | None,
    ) -> tuple[float, float]:
        """Return (baseline, historical); historical is meaningless without ``past``."""
        ...


class HistoricalLookup(Protocol):
    def get(self, segment_id: int, month: int, hour: int) -> Conditions | None:
        """Return the long-run average for a local month (1-12) and hour (0-23)."""
        ...


def historical_for(
    lookup: HistoricalLookup | None,
    climb: Climb,
    conditions: Conditions,
    ctx: GenerationContext,
) -> Conditions | None:
    if lookup is None:
        return None
    local = ctx.localize(conditions.time)
    return lookup.get(climb.segment.id, local.month, local.hour)


def score_conditions(
    climb: Climb,
    conditions: Conditions,
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None = None,
) -> ScoredCondition:
    """Score one snapshot under both conventions.

    Raises:
        ScoringError: If the oracle raises
    """
    local = ctx.localize(conditions.time)
    past = historical_for(lookup, climb, conditions, ctx)
    try:
        baseline, historical = oracle(climb.segment, conditions, past)
    except Exception as e:
        raise ScoringError(f"scoring failed at {full_time(local)}: {e}", climb=climb.name, local_time=local) from e
    return ScoredCondition(
        conditions=conditions,
        local_time=local,
        baseline=baseline,
        historical=historical if past is not None else None,
    )


@dataclass
class BestSelector:
    """Running minima over the cells offered to it."""

    baseline: ScoredCondition | None = None
    historical: ScoredCondition | None = None

    def consider(self, cell: ScoredCondition) -> None:
        if self.baseline is None or cell.baseline < self.baseline.baseline:
            self.baseline = cell
        if cell.historical is not None and (
            self.historical is None or cell.historical < self.historical.historical
        ):
            self.historical = cell


@dataclass(frozen=True)
class ScoredGrid:
    current: ScoredCondition | None
    days: tuple[DayBucket, ...]
    best_baseline: ScoredCondition | None
    best_historical: ScoredCondition | None


def score_days(
    climb: Climb,
    days: Sequence[RawDay],
    current: Conditions | None,
    ctx: GenerationContext,
    oracle: ScoringOracle,
    lookup: HistoricalLookup | None = None,
) -> ScoredGrid:
    """Score every present cell and the current snapshot.

    The grid cell holding the current snapshot reuses the current
    ScoredCondition and is never offered to the best selector.
    """
    scored_current = None
    if current is not None:
        scored_current = score_conditions(climb, current, ctx, oracle, lookup)

    best = BestSelector()
    buckets = []
    for day in days:
        cells: list[ScoredCondition | None] = []
        for conditions in day.cells:
            if conditions is None:
                cells.append(None)
            elif scored_current is not None and conditions == scored_current.conditions:
                cells.append(scored_current)
            else:
                cell = score_conditions(climb, conditions, ctx, oracle, lookup)
                best.consider(cell)
                cells.append(cell)
        buckets.append(DayBucket(day=day.day, key=day.key, conditions=tuple(cells)))

    return ScoredGrid(
        current=scored_current,
        days=tuple(buckets),
        best_baseline=best.baseline,
        best_historical=best.historical,
    )
