"""Route planning services."""

from .service import (
    InsufficientLocationsError,
    Notice,
    PlanningOutcome,
    RoutePlanner,
    build_route_planner,
)

__all__ = [
    "InsufficientLocationsError",
    "Notice",
    "PlanningOutcome",
    "RoutePlanner",
    "build_route_planner",
]
