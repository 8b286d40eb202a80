"""Route planning request/response schemas."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..services.routing.distance import DISTANCE_NOTE


class RoutePlanRequest(BaseModel):
    date: Optional[dt.date] = Field(default=None, description="Calendar date to plan; defaults to today.")
    start_address: Optional[str] = Field(default=None, description="Overrides the saved start address.")
    end_address: Optional[str] = Field(default=None, description="Overrides the saved end address.")
    use_saved_settings: bool = Field(
        default=True,
        description="Fall back to the saved start/end addresses when no override is given.",
    )


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class RouteStopModel(BaseModel):
    sequence: int
    label: str
    coordinate: CoordinateModel


class NoticeModel(BaseModel):
    level: Literal["success", "warning", "error"]
    message: str


class RoutePlanResponse(BaseModel):
    status: Literal["ok", "partial", "failed", "cancelled"]
    date: dt.date
    stops: List[RouteStopModel]
    failure_count: int
    distance_miles: str
    distance_note: str = DISTANCE_NOTE
    notices: List[NoticeModel]
    bounds: Dict[str, float] = Field(default_factory=dict)
    directions_url: Optional[str] = None
    map: Optional[dict] = None


class RouteLinkRequest(BaseModel):
    addresses: List[str] = Field(..., description="Ordered addresses: origin, waypoints, destination.")


class RouteLinkResponse(BaseModel):
    url: str


class RouteSettingsModel(BaseModel):
    start_address: Optional[str] = None
    end_address: Optional[str] = None


class PlannerStatusResponse(BaseModel):
    loading: bool = Field(..., description="True while a planning run is resolving addresses.")
    last_status: Optional[Literal["ok", "partial", "failed", "cancelled"]] = None
    last_stop_count: int = 0
    last_distance_miles: Optional[str] = None
