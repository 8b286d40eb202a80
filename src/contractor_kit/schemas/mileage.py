"""Mileage log schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field


class MileageEntryModel(BaseModel):
    id: Optional[str] = None
    date: dt.date
    distance_miles: float = Field(..., ge=0)
    purpose: Optional[str] = None
    notes: Optional[str] = None


class RouteMileageRequest(BaseModel):
    date: Optional[dt.date] = Field(default=None, description="Date to log the miles under; defaults to today.")
    purpose: Optional[str] = Field(default=None, description="Defaults to 'Route: <n> stops'.")
    notes: Optional[str] = None


class MileageListResponse(BaseModel):
    entries: List[MileageEntryModel]


class MileageEntryCreate(BaseModel):
    date: dt.date
    distance_miles: float = Field(..., gt=0, description="Miles driven, as entered by the contractor.")
    purpose: Optional[str] = None
    notes: Optional[str] = None
