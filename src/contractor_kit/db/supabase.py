"""Supabase client for Python backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


class RepositoryError(RuntimeError):
    """A Supabase table call failed or the database is not configured."""


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Example usage patterns:
#
# from .db.supabase import get_supabase_client
#
# supabase = get_supabase_client()
#
# # Today's appointments
# result = supabase.table('appointments') \
#     .select('*') \
#     .eq('date', '2025-03-14') \
#     .order('time') \
#     .execute()
#
# # Log miles
# result = supabase.table('mileage_entries').insert({
#     'date': '2025-03-14',
#     'distance': 12.4,
#     'purpose': 'Route: 4 stops',
# }).execute()
