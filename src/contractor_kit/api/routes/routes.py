"""Route planning endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from ...data.appointments_repository import fetch_appointments
from ...data.clients_repository import fetch_clients
from ...db.supabase import RepositoryError
from ...models.domain import RouteSettings
from ...persistence.settings_store import RouteSettingsStore
from ...schemas.routing import (
    CoordinateModel,
    NoticeModel,
    PlannerStatusResponse,
    RouteLinkRequest,
    RouteLinkResponse,
    RoutePlanRequest,
    RoutePlanResponse,
    RouteSettingsModel,
    RouteStopModel,
)
from ...services.planning.service import InsufficientLocationsError, PlanningOutcome, RoutePlanner
from ...services.routing.links import build_link
from ..dependencies import get_route_planner, get_settings_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


def _override(value: str | None) -> str | None:
    return (value or "").strip() or None


def _resolve_route_settings(payload: RoutePlanRequest, store: RouteSettingsStore) -> RouteSettings:
    saved = store.load() if payload.use_saved_settings else RouteSettings()
    return RouteSettings(
        start_address=_override(payload.start_address) or saved.start_address,
        end_address=_override(payload.end_address) or saved.end_address,
    )


def _to_response(outcome: PlanningOutcome, plan_date: date, map_document: dict | None) -> RoutePlanResponse:
    directions = build_link([item.address for item in outcome.addresses]) if outcome.succeeded else None
    return RoutePlanResponse(
        status=outcome.status,
        date=plan_date,
        stops=[
            RouteStopModel(
                sequence=index,
                label=stop.label,
                coordinate=CoordinateModel(lat=stop.coordinate.latitude, lon=stop.coordinate.longitude),
            )
            for index, stop in enumerate(outcome.stops, start=1)
        ],
        failure_count=outcome.failure_count,
        distance_miles=outcome.distance_miles,
        notices=[NoticeModel(level=notice.level, message=notice.message) for notice in outcome.notices],
        bounds=outcome.bounds,
        directions_url=directions.url if directions else None,
        map=map_document,
    )


@router.post("/plan", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
async def plan(
    payload: RoutePlanRequest,
    planner: RoutePlanner = Depends(get_route_planner),
    store: RouteSettingsStore = Depends(get_settings_store),
) -> RoutePlanResponse:
    plan_date = payload.date or date.today()
    route_settings = _resolve_route_settings(payload, store)

    try:
        appointments = await run_in_threadpool(fetch_appointments, plan_date)
        clients = await run_in_threadpool(fetch_clients)
    except RepositoryError as exc:
        logger.error(f"Could not load planning data: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    try:
        outcome = await planner.plan_route(appointments, clients, route_settings, today=plan_date)
    except InsufficientLocationsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error planning route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Route planning failed. Please try again.",
        ) from exc

    map_document = await planner.map_document() if outcome.succeeded else None
    return _to_response(outcome, plan_date, map_document)


@router.post("/link", response_model=RouteLinkResponse, status_code=status.HTTP_200_OK)
def link(payload: RouteLinkRequest) -> RouteLinkResponse:
    """Turn-by-turn directions handed off to the external mapping provider."""
    result = build_link(payload.addresses)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return RouteLinkResponse(url=result.url)


@router.get("/settings", response_model=RouteSettingsModel, status_code=status.HTTP_200_OK)
def get_settings(store: RouteSettingsStore = Depends(get_settings_store)) -> RouteSettingsModel:
    saved = store.load()
    return RouteSettingsModel(start_address=saved.start_address, end_address=saved.end_address)


@router.put("/settings", response_model=RouteSettingsModel, status_code=status.HTTP_200_OK)
def put_settings(
    payload: RouteSettingsModel,
    store: RouteSettingsStore = Depends(get_settings_store),
) -> RouteSettingsModel:
    try:
        saved = store.save(RouteSettings(start_address=payload.start_address, end_address=payload.end_address))
    except OSError as exc:
        logging.exception(f"Error saving route settings: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save route settings: {str(exc)}",
        ) from exc
    return RouteSettingsModel(start_address=saved.start_address, end_address=saved.end_address)


@router.get("/status", response_model=PlannerStatusResponse, status_code=status.HTTP_200_OK)
def planner_status(planner: RoutePlanner = Depends(get_route_planner)) -> PlannerStatusResponse:
    """Loading flag for the planner plus a summary of its last finished run."""
    last = planner.last_outcome
    if last is None:
        return PlannerStatusResponse(loading=planner.is_loading)
    summary = last.summary()
    return PlannerStatusResponse(
        loading=planner.is_loading,
        last_status=summary["status"],
        last_stop_count=summary["stop_count"],
        last_distance_miles=summary["distance_miles"],
    )
