"""Database clients and utilities."""

from .store import Filter, RecordStore, SupabaseStore, get_store
from .supabase import get_supabase_client

__all__ = ["Filter", "RecordStore", "SupabaseStore", "get_store", "get_supabase_client"]
