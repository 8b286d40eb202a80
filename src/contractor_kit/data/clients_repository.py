"""Data access helpers for loading clients from Supabase."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..db.supabase import RepositoryError, get_supabase_client
from ..models.domain import Client

logger = logging.getLogger(__name__)


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def client_from_row(row: dict[str, Any]) -> Client:
    return Client(
        client_id=str(row["id"]),
        name=clean_text(row.get("name")) or "",
        phone=clean_text(row.get("phone")),
        email=clean_text(row.get("email")),
        address=clean_text(row.get("address")),
        notes=clean_text(row.get("notes")),
    )


def clients_from_rows(rows: Iterable[dict[str, Any]]) -> tuple[Client, ...]:
    clients: list[Client] = []
    for row in rows:
        try:
            clients.append(client_from_row(row))
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping invalid client row: {e}")
    return tuple(clients)


def fetch_clients() -> tuple[Client, ...]:
    """Load every client visible to the configured key."""

    supabase = get_supabase_client()
    if not supabase:
        logger.info("Supabase not configured - no clients available")
        return tuple()

    try:
        response = supabase.table("clients").select("*").order("name").execute()
    except Exception as exc:
        raise RepositoryError(f"Failed to load clients: {exc}") from exc
    return clients_from_rows(response.data or [])
