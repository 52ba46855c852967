from __future__ import annotations

import math

from pydantic import BaseModel

from windsock.climbs import LatLng, Segment
from windsock.physics.wnf import CLIMB_THRESHOLD


class StravaSegment(BaseModel):
    id: int
    name: str
    distance: float
    average_grade: float  # percent
    elevation_high: float
    elevation_low: float
    total_elevation_gain: float = 0.0
    start_latlng: list[float]
    end_latlng: list[float]

    raw: dict | None = None


def bearing(start: LatLng, end: LatLng) -> float:
    """Initial great-circle bearing from ``start`` to ``end`` in degrees."""
    lat1, lat2 = math.radians(start.lat), math.radians(end.lat)
    dlng = math.radians(end.lng - start.lng)
    x = math.sin(dlng) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlng)
    return (math.degrees(math.atan2(x, y)) + 360) % 360


def map_strava_segment(segment: StravaSegment) -> Segment:
    """Map a Strava API segment to the physical Segment used for scoring.

    Climbs use the net elevation gain over distance as their grade; flatter
    segments keep Strava's own grade and total gain.
    """
    gain = segment.elevation_high - segment.elevation_low
    grade = gain / segment.distance if segment.distance else 0.0
    strava_grade = segment.average_grade / 100
    if strava_grade < CLIMB_THRESHOLD:
        gain = segment.total_elevation_gain
        grade = strava_grade

    start = LatLng(lat=segment.start_latlng[0], lng=segment.start_latlng[1])
    end = LatLng(lat=segment.end_latlng[0], lng=segment.end_latlng[1])
    return Segment(
        id=segment.id,
        name=segment.name,
        distance=segment.distance,
        average_grade=grade,
        elevation_low=segment.elevation_low,
        elevation_high=segment.elevation_high,
        total_elevation_gain=gain,
        median_elevation=(segment.elevation_high + segment.elevation_low) / 2,
        start_location=start,
        end_location=end,
        average_location=LatLng(lat=(start.lat + end.lat) / 2, lng=(start.lng + end.lng) / 2),
        average_direction=bearing(start, end),
    )
