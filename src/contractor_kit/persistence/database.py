"""Database persistence for mileage entries."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..db.supabase import RepositoryError, get_supabase_client
from ..models.domain import MileageEntry

logger = logging.getLogger(__name__)

MILEAGE_TABLE = "mileage_entries"


def mileage_entry_to_row(entry: MileageEntry) -> dict[str, Any]:
    return {
        "date": entry.date.isoformat(),
        "distance": round(entry.distance_miles, 2),
        "purpose": entry.purpose,
        "notes": entry.notes,
    }


def mileage_entry_from_row(row: dict[str, Any]) -> MileageEntry:
    return MileageEntry(
        entry_id=str(row["id"]) if row.get("id") is not None else None,
        date=date.fromisoformat(str(row["date"])[:10]),
        distance_miles=float(row["distance"]),
        purpose=row.get("purpose"),
        notes=row.get("notes"),
    )


def insert_mileage_entry(entry: MileageEntry) -> MileageEntry:
    """Save a mileage entry to Supabase and return it with its database id.

    Raises:
        RepositoryError: If the database is not configured or the insert fails.
    """
    supabase = get_supabase_client()
    if not supabase:
        raise RepositoryError("Supabase not configured. Set CTK_SUPABASE_URL and CTK_SUPABASE_KEY.")

    try:
        response = supabase.table(MILEAGE_TABLE).insert(mileage_entry_to_row(entry)).execute()
    except Exception as exc:
        raise RepositoryError(f"Failed to save mileage entry: {exc}") from exc

    rows = response.data or []
    if not rows:
        return entry
    logger.info(f"Logged {entry.distance_miles:.2f} mi for {entry.date.isoformat()}")
    return mileage_entry_from_row(rows[0])


def fetch_mileage_entries(limit: int = 100) -> list[MileageEntry]:
    """Most recent mileage entries first."""
    supabase = get_supabase_client()
    if not supabase:
        logger.info("Supabase not configured - no mileage entries available")
        return []

    try:
        response = (
            supabase.table(MILEAGE_TABLE)
            .select("*")
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as exc:
        raise RepositoryError(f"Failed to load mileage entries: {exc}") from exc

    entries: list[MileageEntry] = []
    for row in response.data or []:
        try:
            entries.append(mileage_entry_from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid mileage row: {e}")
    return entries
