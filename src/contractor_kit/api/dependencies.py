"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ..persistence.settings_store import RouteSettingsStore
from ..services.planning.service import RoutePlanner, build_route_planner


def get_route_planner(request: Request) -> RoutePlanner:
    """The application's planner; created on first use so cancel-and-restart spans requests."""
    planner = getattr(request.app.state, "route_planner", None)
    if planner is None:
        planner = build_route_planner()
        request.app.state.route_planner = planner
    return planner


def get_settings_store() -> RouteSettingsStore:
    return RouteSettingsStore()
