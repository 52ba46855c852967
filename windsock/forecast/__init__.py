"""Forecast grid construction and navigation linking.

This package turns a chronological hourly forecast into a padded, validated
day/hour grid per climb, scores every cell, links cells and climbs together
and resolves the alias names each climb page is reachable under.
"""
