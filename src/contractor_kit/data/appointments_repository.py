"""Data access helpers for loading appointments from Supabase."""

from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Iterable, Optional

from ..db.supabase import RepositoryError, get_supabase_client
from ..models.domain import Appointment
from .clients_repository import clean_text

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _parse_time(value: Any) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def appointment_from_row(row: dict[str, Any]) -> Appointment:
    client_id = row.get("client_id")
    return Appointment(
        appointment_id=str(row["id"]),
        date=_parse_date(row["date"]),
        time=_parse_time(row.get("time")),
        client_id=str(client_id) if client_id is not None else None,
        client_name=clean_text(row.get("client_name") or row.get("client")) or "",
        location=clean_text(row.get("location")),
        notes=clean_text(row.get("notes")),
    )


def appointments_from_rows(rows: Iterable[dict[str, Any]]) -> tuple[Appointment, ...]:
    appointments: list[Appointment] = []
    for row in rows:
        try:
            appointments.append(appointment_from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid appointment row: {e}")
    return tuple(appointments)


def fetch_appointments(on_date: date | None = None) -> tuple[Appointment, ...]:
    """Load appointments, optionally limited to a single calendar date."""

    supabase = get_supabase_client()
    if not supabase:
        logger.info("Supabase not configured - no appointments available")
        return tuple()

    try:
        query = supabase.table("appointments").select("*")
        if on_date is not None:
            query = query.eq("date", on_date.isoformat())
        response = query.order("date").order("time").execute()
    except Exception as exc:
        raise RepositoryError(f"Failed to load appointments: {exc}") from exc
    return appointments_from_rows(response.data or [])
