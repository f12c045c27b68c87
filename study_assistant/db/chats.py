"""CRUD for the chats table."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def list_chats(client: Client) -> List[Dict[str, Any]]:
    """All chats, most recently updated first. Returns [] if the query fails."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table("chats")
            .select("*")
            .order("updated_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to list chats: %s", e)
        return []
    return response.data or []


async def get_chat(client: Client, chat_id: str) -> Optional[Dict[str, Any]]:
    """Get a chat by id."""
    response = await asyncio.to_thread(
        lambda: client.table("chats")
        .select("*")
        .eq("id", str(chat_id))
        .maybe_single()
        .execute()
    )
    if response is not None and response.data:
        row = response.data[0] if isinstance(response.data, list) else response.data
        return row
    return None


async def create_chat(client: Client, title: str, model: str) -> Dict[str, Any]:
    """Create a chat. Falls back to the unsaved record if the insert fails."""
    timestamp = _now()
    record: Dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "title": title,
        "model": model,
        "created_at": timestamp,
        "updated_at": timestamp,
    }
    try:
        response = await asyncio.to_thread(
            lambda: client.table("chats").insert(record).execute()
        )
    except Exception as e:
        logger.warning("Insert chat failed, returning local record: %s", e)
        return record
    if response.data:
        return response.data[0]
    return record


async def rename_chat(client: Client, chat_id: str, title: str) -> Optional[Dict[str, Any]]:
    """Rename a chat. Returns the updated row or None if it does not exist."""
    response = await asyncio.to_thread(
        lambda: client.table("chats")
        .update({"title": title, "updated_at": _now()})
        .eq("id", str(chat_id))
        .execute()
    )
    if response.data:
        return response.data[0]
    return None


async def touch_chat(client: Client, chat_id: str) -> None:
    """Bump updated_at so the chat sorts first. Failures are only logged."""
    try:
        await asyncio.to_thread(
            lambda: client.table("chats")
            .update({"updated_at": _now()})
            .eq("id", str(chat_id))
            .execute()
        )
    except Exception as e:
        logger.warning("Failed to touch chat %s: %s", chat_id, e)


async def delete_chat(client: Client, chat_id: str) -> bool:
    """Delete a chat and its messages (messages first). Returns False on failure."""
    try:
        await asyncio.to_thread(
            lambda: client.table("messages").delete().eq("chat_id", str(chat_id)).execute()
        )
        await asyncio.to_thread(
            lambda: client.table("chats").delete().eq("id", str(chat_id)).execute()
        )
    except Exception as e:
        logger.error("Failed to delete chat %s: %s", chat_id, e)
        return False
    return True
