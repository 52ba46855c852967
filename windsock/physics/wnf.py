"""Wind normalized factor: how much the weather slows a reference rider.

A fixed rider holds constant power up the segment. Steady-state speed is
solved for the given air density and headwind component, and the factor is
the ratio of elapsed times (> 1 slower, < 1 faster).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from windsock.climbs import Segment
from windsock.forecast.models import Conditions

G = 9.80665
STANDARD_AIR_DENSITY = 1.225

# Segments flatter than this are ridden in a time trial position.
CLIMB_THRESHOLD = 0.03
CDA_CLIMB = 0.325
CDA_TT = 0.25


@dataclass(frozen=True)
class Rider:
    power: float = 250.0  # W
    mass: float = 80.0  # kg, rider and bike
    crr: float = 0.005
    drivetrain_loss: float = 0.03


def headwind(conditions: Conditions, heading: float) -> float:
    """Component of the wind opposing travel along ``heading`` (m/s)."""
    return conditions.wind_speed * math.cos(math.radians(conditions.wind_bearing - heading))


def required_power(v: float, grade: float, rho: float, cda: float, wind: float, rider: Rider) -> float:
    theta = math.atan(grade)
    resist = rider.mass * G * (math.sin(theta) + rider.crr * math.cos(theta))
    air = v + wind
    return (resist * v + 0.5 * rho * cda * air * abs(air) * v) / (1 - rider.drivetrain_loss)


def steady_speed(grade: float, rho: float, cda: float, wind: float, rider: Rider) -> float:
    """Solve for the speed at which the rider's power is fully consumed."""
    lo, hi = 0.01, 40.0
    for _ in range(80):
        mid = (lo + hi) / 2
        if required_power(mid, grade, rho, cda, wind, rider) < rider.power:
            lo = mid
        else:
            hi = mid
    return (lo + hi) / 2


def cda_for(segment: Segment) -> float:
    return CDA_TT if segment.average_grade < CLIMB_THRESHOLD else CDA_CLIMB


def speed_in(segment: Segment, conditions: Conditions, rider: Rider) -> float:
    return steady_speed(
        segment.average_grade,
        conditions.air_density,
        cda_for(segment),
        headwind(conditions, segment.average_direction),
        rider,
    )


@dataclass(frozen=True)
class WindNormalizedOracle:
    """Default scoring oracle.

    Baseline compares the conditions to still air at standard density;
    historical compares them to the supplied long-run average and is 0.0
    when there is none.
    """

    rider: Rider = Rider()

    def __call__(self, segment: Segment, current: Conditions, past: Conditions | None) -> tuple[float, float]:
        if segment.distance <= 0:
            raise ValueError(f"segment {segment.id} has no distance")
        v = speed_in(segment, current, self.rider)
        neutral = steady_speed(segment.average_grade, STANDARD_AIR_DENSITY, cda_for(segment), 0.0, self.rider)
        baseline = neutral / v
        historical = 0.0
        if past is not None:
            historical = speed_in(segment, past, self.rider) / v
        return baseline, historical
