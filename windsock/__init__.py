"""Windsock - hourly climb forecasts scored for cycling performance."""

__version__ = "0.1.0"
