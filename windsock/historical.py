"""Long-run average conditions per climb, month and hour.

The averages file maps a segment id to twelve months of twenty-four hourly
averages; any slot may be null when there was not enough history.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, RootModel

from windsock.forecast.models import Conditions


class HistoricalHourlyAverages(BaseModel):
    hourly: list[Conditions | None] = Field(default_factory=list)


class HistoricalMonthlyAverages(BaseModel):
    monthly: list[HistoricalHourlyAverages] = Field(default_factory=list)


class HistoricalAverages(RootModel[dict[int, HistoricalMonthlyAverages]]):
    def get(self, segment_id: int, month: int, hour: int) -> Conditions | None:
        """Return the average for a local month (1-12) and hour (0-23), if any."""
        averages = self.root.get(segment_id)
        if averages is None or not 1 <= month <= len(averages.monthly):
            return None
        hourly = averages.monthly[month - 1].hourly
        if not 0 <= hour < len(hourly):
            return None
        return hourly[hour]


def load_historical_averages(path: str | Path) -> HistoricalAverages:
    raw = Path(path).read_text(encoding="utf-8")
    averages = HistoricalAverages.model_validate_json(raw)
    logger.debug(f"Loaded historical averages for {len(averages.root)} segments from {path}")
    return averages
