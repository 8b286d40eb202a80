"""Database clients and utilities."""

from .supabase import RepositoryError, get_supabase_client

__all__ = ["RepositoryError", "get_supabase_client"]
