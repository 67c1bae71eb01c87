"""Cached Supabase client used by the record store."""

import logging
from functools import lru_cache

from supabase import Client, create_client
from supabase.client import ClientOptions

from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the shared client, or None when credentials are missing.

    Creating the client does not open a connection; the first query is what
    surfaces network or permission problems, as a ``StoreError``.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    options = ClientOptions(
        schema=settings.supabase_schema,
        postgrest_client_timeout=settings.supabase_timeout_seconds,
    )
    try:
        return create_client(settings.supabase_url, settings.supabase_key, options=options)
    except Exception as e:
        logging.error(f"Failed to create Supabase client for schema '{settings.supabase_schema}': {e}")
        return None
