"""Tests for the wind normalized factor oracle."""

import pytest

from windsock.climbs import Segment
from windsock.forecast.models import Conditions
from windsock.physics.wnf import (
    CDA_CLIMB,
    CDA_TT,
    STANDARD_AIR_DENSITY,
    Rider,
    WindNormalizedOracle,
    cda_for,
    headwind,
    required_power,
    steady_speed,
)


def _segment(grade: float = 0.07, heading: float = 0.0, distance: float = 4800.0) -> Segment:
    return Segment(id=1, name="Test", distance=distance, average_grade=grade, average_direction=heading)


def test_still_standard_air_is_neutral():
    baseline, historical = WindNormalizedOracle()(_segment(), Conditions(air_density=STANDARD_AIR_DENSITY), None)
    assert baseline == pytest.approx(1.0, abs=1e-6)
    assert historical == 0.0


def test_headwind_is_slower_and_tailwind_faster():
    oracle = WindNormalizedOracle()
    # Riding north; wind bearing is where the wind comes from
    head, _ = oracle(_segment(heading=0.0), Conditions(wind_speed=6.0, wind_bearing=0.0), None)
    tail, _ = oracle(_segment(heading=0.0), Conditions(wind_speed=6.0, wind_bearing=180.0), None)
    assert head > 1.0
    assert tail < 1.0


def test_crosswind_has_no_headwind_component():
    assert headwind(Conditions(wind_speed=5.0, wind_bearing=90.0), 0.0) == pytest.approx(0.0, abs=1e-9)
    assert headwind(Conditions(wind_speed=5.0, wind_bearing=0.0), 0.0) == pytest.approx(5.0)


def test_thin_air_is_faster():
    baseline, _ = WindNormalizedOracle()(_segment(), Conditions(air_density=1.0), None)
    assert baseline < 1.0


def test_historical_relative_to_past():
    oracle = WindNormalizedOracle()
    calm = Conditions(wind_speed=0.0)
    windy = Conditions(wind_speed=8.0, wind_bearing=0.0)
    _, same = oracle(_segment(), windy, windy)
    _, worse = oracle(_segment(), windy, calm)
    assert same == pytest.approx(1.0)
    assert worse > 1.0


def test_flat_segments_use_time_trial_position():
    assert cda_for(_segment(grade=0.01)) == CDA_TT
    assert cda_for(_segment(grade=0.05)) == CDA_CLIMB


def test_steady_speed_consumes_rider_power():
    rider = Rider()
    v = steady_speed(0.07, STANDARD_AIR_DENSITY, CDA_CLIMB, 0.0, rider)
    assert required_power(v, 0.07, STANDARD_AIR_DENSITY, CDA_CLIMB, 0.0, rider) == pytest.approx(rider.power, rel=1e-4)


def test_zero_distance_segment_is_rejected():
    with pytest.raises(ValueError):
        WindNormalizedOracle()(_segment(distance=0.0), Conditions(), None)
