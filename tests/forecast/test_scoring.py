"""Tests for cell scoring and best-cell selection."""

from datetime import datetime

import pytest

from windsock.forecast.errors import ScoringError
from windsock.forecast.grid import build_climb_grid
from windsock.forecast.models import Conditions
from windsock.forecast.scoring import BestSelector, score_conditions


def _cells(grid):
    return [cell for day in grid.days for cell in day.conditions if cell is not None]


def test_current_cell_is_shared_with_grid(ctx, make_climb, oracle, eight_day_hourly):
    grid = build_climb_grid(make_climb("Old La Honda"), eight_day_hourly, ctx, oracle)
    assert grid.days[0].conditions[1] is grid.current
    assert grid.current_position() == (0, 1)


def test_best_never_current_even_when_current_scores_lowest(ctx, make_climb, oracle, make_hourly, tz):
    """Current has no wind at all, yet the best pick is the calmest plannable hour."""
    hourly = make_hourly(datetime(2024, 6, 3, 7, 0, tzinfo=tz), 168, wind={0: 0.0})
    grid = build_climb_grid(make_climb("Old La Honda"), hourly, ctx, oracle)

    assert grid.current.baseline == pytest.approx(1.0)
    assert grid.best_baseline is not grid.current
    assert not grid.is_current(grid.best_baseline)
    others = [c for c in _cells(grid) if not grid.is_current(c)]
    assert grid.best_baseline.baseline == min(c.baseline for c in others)


def test_best_keeps_first_of_equal_scores(ctx, make_climb, oracle, eight_day_hourly):
    grid = build_climb_grid(make_climb("Old La Honda"), eight_day_hourly, ctx, oracle)
    others = [c for c in _cells(grid) if not grid.is_current(c)]
    lowest = min(c.baseline for c in others)
    first = next(c for c in others if c.baseline == lowest)
    assert grid.best_baseline is first


def test_no_lookup_means_no_historical(ctx, make_climb, oracle, eight_day_hourly):
    grid = build_climb_grid(make_climb("Kings Mountain"), eight_day_hourly, ctx, oracle)
    assert grid.best_historical is None
    assert all(c.historical is None for c in _cells(grid))
    assert grid.current.score(True) == ""
    assert grid.current.rank(True) == 0


def test_partial_historical_coverage(ctx, make_climb, oracle, eight_day_hourly, static_lookup):
    """Only 6AM has averages, so only 6AM cells carry historical scores."""
    lookup = static_lookup(Conditions(wind_speed=5.0), hours={6})
    grid = build_climb_grid(make_climb("Kings Mountain", segment_id=42), eight_day_hourly, ctx, oracle, lookup)

    for cell in _cells(grid):
        if cell.local_time.hour == 6:
            assert cell.historical == pytest.approx(1.0 + (cell.conditions.wind_speed - 5.0) / 100)
        else:
            assert cell.historical is None
    assert grid.best_historical is not None
    assert grid.best_historical.local_time.hour == 6
    assert all(segment_id == 42 and month == 6 for segment_id, month, _ in lookup.calls)


def test_oracle_failure_raises_scoring_error(ctx, make_climb, eight_day_hourly):
    def broken(segment, current, past):
        if current.wind_speed == 7.0:
            raise ValueError("no solution")
        return 1.0, 0.0

    with pytest.raises(ScoringError) as exc:
        build_climb_grid(make_climb("Mount Hamilton"), eight_day_hourly, ctx, broken)
    assert exc.value.climb == "Mount Hamilton"
    assert isinstance(exc.value.__cause__, ValueError)
    assert "no solution" in str(exc.value)


def test_score_conditions_localizes(ctx, make_climb, oracle, eight_day_hourly):
    cell = score_conditions(make_climb("Kings"), eight_day_hourly[1], ctx, oracle)
    assert cell.local_time.hour == 8
    assert cell.day_time() == "Monday 8AM"
    assert cell.day_time_slug() == "monday-8am"
    assert cell.full_time() == "2024-06-03 08:00"
    assert cell.disambiguated_day() == "Monday 3"


def test_best_selector_skips_missing_historical(ctx, make_climb, oracle, eight_day_hourly):
    selector = BestSelector()
    cell = score_conditions(make_climb("Kings"), eight_day_hourly[1], ctx, oracle)
    selector.consider(cell)
    assert selector.baseline is cell
    assert selector.historical is None
