"""Climb registry.

Climbs are loaded from JSON files holding a list of objects with a primary
``name``, optional ``aliases`` and the physical ``segment`` metadata used by the
scoring oracle. The first file defines the visible climbs; an optional second
file appends "hidden" climbs which get their own pages but are left out of the
cross-climb navigation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from windsock.forecast.errors import ClimbNotFoundError


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class Segment(BaseModel):
    """Physical description of a Strava segment."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    distance: float  # meters
    average_grade: float  # fraction, 0.07 == 7%
    elevation_low: float = 0.0
    elevation_high: float = 0.0
    total_elevation_gain: float = 0.0
    median_elevation: float = 0.0
    start_location: LatLng | None = None
    end_location: LatLng | None = None
    average_location: LatLng | None = None
    average_direction: float = 0.0  # degrees, heading of travel
    map: str = ""

    def location(self) -> LatLng:
        """Return the point forecasts are requested for."""
        if self.average_location is not None:
            return self.average_location
        if self.start_location is not None and self.end_location is not None:
            return LatLng(
                lat=(self.start_location.lat + self.end_location.lat) / 2,
                lng=(self.start_location.lng + self.end_location.lng) / 2,
            )
        if self.start_location is not None:
            return self.start_location
        raise ValueError(f"Segment {self.id} ({self.name}) has no location")


class Climb(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    aliases: tuple[str, ...] = Field(default_factory=tuple)
    segment: Segment


_CLIMBS = TypeAdapter(list[Climb])


def load_climbs(path: str | Path) -> list[Climb]:
    """Load an ordered list of climbs from a JSON file."""
    raw = Path(path).read_text(encoding="utf-8")
    climbs = _CLIMBS.validate_json(raw)
    logger.debug(f"Loaded {len(climbs)} climbs from {path}")
    return climbs


@dataclass(frozen=True)
class ClimbRegistry:
    """Ordered climbs plus the number of them taking part in navigation.

    Attributes:
        climbs: Visible climbs followed by hidden ones
        hidden: Count of leading climbs that are visible (linked in sequence)
    """

    climbs: tuple[Climb, ...]
    hidden: int

    @classmethod
    def from_files(cls, climbs_file: str | Path, hidden_file: str | Path | None = None) -> ClimbRegistry:
        climbs = load_climbs(climbs_file)
        hidden = len(climbs)
        if hidden_file:
            climbs.extend(load_climbs(hidden_file))
        return cls(climbs=tuple(climbs), hidden=hidden)

    def find_segment(self, segment_id: int) -> Segment:
        """Return the registered segment with the given id.

        Raises:
            ClimbNotFoundError: If no registered climb uses that segment
        """
        for climb in self.climbs:
            if climb.segment.id == segment_id:
                return climb.segment
        raise ClimbNotFoundError(f"No registered climb for segment {segment_id}")
