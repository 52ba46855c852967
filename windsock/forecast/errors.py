"""Domain-specific errors for forecast grid construction.

Grid validation and scoring failures are fatal for a single climb only: the
pipeline records them and leaves the climb out of the generated site.
"""

from __future__ import annotations

from datetime import datetime


class WindsockError(Exception):
    """Base exception for all windsock errors."""

    pass


class GridValidationError(WindsockError):
    """Raised when a climb's day buckets violate the grid shape invariants.

    Attributes:
        climb: Name of the climb whose grid was rejected
        days: Observed number of day buckets
        cells: Observed number of cells per day bucket
    """

    def __init__(self, message: str, *, climb: str, days: int, cells: list[int]) -> None:
        super().__init__(f"{climb}: {message}")
        self.climb = climb
        self.days = days
        self.cells = cells


class ScoringError(WindsockError):
    """Raised when the scoring oracle fails for a cell."""

    def __init__(self, message: str, *, climb: str, local_time: datetime) -> None:
        super().__init__(f"{climb}: {message}")
        self.climb = climb
        self.local_time = local_time


class ForecastUnavailableError(WindsockError):
    """Raised when the forecast provider cannot deliver hourly data."""

    pass


class ClimbNotFoundError(WindsockError):
    """Raised when a segment id does not belong to any known climb."""

    pass
