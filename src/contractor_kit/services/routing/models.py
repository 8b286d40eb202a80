"""Routing domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError("Coordinate values must be finite.")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class LabeledAddress:
    label: str
    address: str


@dataclass(frozen=True, slots=True)
class RouteStop:
    coordinate: Coordinate
    label: str


# Stops are visited in tuple order. A new tuple replaces the old one on every run.
RouteStopList = Tuple[RouteStop, ...]


@dataclass(frozen=True, slots=True)
class BatchResult:
    stops: RouteStopList
    failure_count: int

    @property
    def attempted(self) -> int:
        return len(self.stops) + self.failure_count
