"""Mileage log endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from ...db.supabase import RepositoryError
from ...models.domain import MileageEntry
from ...persistence.database import fetch_mileage_entries, insert_mileage_entry
from ...schemas.mileage import MileageEntryCreate, MileageEntryModel, MileageListResponse, RouteMileageRequest
from ...services.planning.service import RoutePlanner
from ..dependencies import get_route_planner

router = APIRouter(prefix="/mileage", tags=["mileage"])


def _to_model(entry: MileageEntry) -> MileageEntryModel:
    return MileageEntryModel(
        id=entry.entry_id,
        date=entry.date,
        distance_miles=entry.distance_miles,
        purpose=entry.purpose,
        notes=entry.notes,
    )


@router.get("", response_model=MileageListResponse, status_code=status.HTTP_200_OK)
async def list_entries(limit: int = Query(default=100, ge=1, le=1000)) -> MileageListResponse:
    try:
        entries = await run_in_threadpool(fetch_mileage_entries, limit)
    except RepositoryError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return MileageListResponse(entries=[_to_model(entry) for entry in entries])


@router.post("", response_model=MileageEntryModel, status_code=status.HTTP_201_CREATED)
async def create_entry(payload: MileageEntryCreate) -> MileageEntryModel:
    entry = MileageEntry(
        date=payload.date,
        distance_miles=payload.distance_miles,
        purpose=(payload.purpose or "").strip() or None,
        notes=(payload.notes or "").strip() or None,
    )
    try:
        saved = await run_in_threadpool(insert_mileage_entry, entry)
    except RepositoryError as exc:
        logging.exception(f"Error saving mileage entry: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return _to_model(saved)


@router.post("/from-route", response_model=MileageEntryModel, status_code=status.HTTP_201_CREATED)
async def log_route_mileage(
    payload: RouteMileageRequest,
    planner: RoutePlanner = Depends(get_route_planner),
) -> MileageEntryModel:
    """Log the most recently planned route's straight-line distance."""
    outcome = planner.last_outcome
    if outcome is None or not outcome.succeeded:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Plan a route before logging its mileage.",
        )

    entry = MileageEntry(
        date=payload.date or date.today(),
        distance_miles=round(outcome.distance_value, 2),
        purpose=payload.purpose or f"Route: {len(outcome.stops)} stops",
        notes=payload.notes,
    )
    try:
        saved = await run_in_threadpool(insert_mileage_entry, entry)
    except RepositoryError as exc:
        logging.exception(f"Error logging route mileage: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return _to_model(saved)
