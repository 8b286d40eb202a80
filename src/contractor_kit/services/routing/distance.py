"""Straight-line distance estimates for an ordered stop list.

The figures are great-circle distances between consecutive stops. They are
shorter than the real driving distance and are labelled as such wherever they
are shown.
"""

from __future__ import annotations

from typing import Sequence

from ..geospatial import haversine_miles
from .models import RouteStop

DISTANCE_NOTE = "Straight-line estimate between stops; actual driving distance will be longer."


def total_distance_miles(stops: Sequence[RouteStop]) -> float:
    if len(stops) < 2:
        return 0.0
    total = 0.0
    for previous, current in zip(stops, stops[1:]):
        total += haversine_miles(
            previous.coordinate.latitude,
            previous.coordinate.longitude,
            current.coordinate.latitude,
            current.coordinate.longitude,
        )
    return total


def total_distance(stops: Sequence[RouteStop]) -> str:
    """Return the cumulative distance in miles formatted to two decimals."""

    return f"{total_distance_miles(stops):.2f}"
