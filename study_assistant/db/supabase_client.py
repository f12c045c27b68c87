"""Shared Supabase client and schema probe.

The service role key, when configured, is used in preference to the anon
key so server-side writes are not blocked by row level security.
"""

import asyncio
import logging
import threading
from typing import Dict

from supabase import create_client, Client
from study_assistant.config import get_settings

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("chats", "messages", "concept_cards", "todos")

_client: Client | None = None
_lock = threading.Lock()


def _connect() -> Client:
    settings = get_settings()
    if settings.supabase_service_role_key:
        key, key_kind = settings.supabase_service_role_key, "service role"
    else:
        key, key_kind = settings.supabase_key, "anon"
    try:
        client = create_client(settings.supabase_url, key)
    except Exception as e:
        raise ValueError(f"Failed to create Supabase client: {e}") from e
    logger.info("Supabase client ready (%s key)", key_kind)
    return client


def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client, creating it on first use.

    Raises:
        ValidationError: If the Supabase settings are missing or invalid
        ValueError: If the client cannot be created
    """
    global _client
    if _client is None:
        with _lock:
            if _client is None:
                _client = _connect()
    return _client


def reset_supabase_client() -> None:
    """Forget the cached client so the next call reconnects."""
    global _client
    with _lock:
        _client = None


async def verify_tables(client: Client) -> Dict[str, bool]:
    """Probe each required table; returns table name -> reachable."""
    results: Dict[str, bool] = {}
    for table in REQUIRED_TABLES:
        try:
            await asyncio.to_thread(
                lambda t=table: client.table(t).select("id").limit(1).execute()
            )
        except Exception as e:
            logger.error("Table %s is not reachable: %s", table, e)
            results[table] = False
        else:
            results[table] = True
    return results
