"""CRUD for the messages table."""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)

VALID_ROLES = frozenset({"user", "assistant"})


async def list_messages(client: Client, chat_id: str) -> List[Dict[str, Any]]:
    """Messages of a chat, oldest first. Returns [] if the query fails."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table("messages")
            .select("*")
            .eq("chat_id", str(chat_id))
            .order("created_at", desc=False)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to list messages for chat %s: %s", chat_id, e)
        return []
    return response.data or []


async def add_message(
    client: Client,
    chat_id: str,
    role: str,
    content: str,
    attachments: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Store a message.

    The record is echoed back unsaved when the insert fails, so a database
    outage never blocks the conversation.

    Raises:
        ValueError: If chat_id, role or content is missing or role is unknown.
    """
    if not chat_id:
        raise ValueError("Cannot add message: missing chat_id")
    if role not in VALID_ROLES:
        raise ValueError(f"Cannot add message: invalid role {role!r}")
    if not content:
        raise ValueError("Cannot add message: missing content")

    record: Dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "chat_id": str(chat_id),
        "role": role,
        "content": content,
        "attachments": json.dumps(attachments) if attachments else None,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        response = await asyncio.to_thread(
            lambda: client.table("messages").insert(record).execute()
        )
    except Exception as e:
        logger.warning("Insert message failed for chat %s, returning local record: %s", chat_id, e)
        return record
    if response.data:
        return response.data[0]
    return record
