"""CRUD for the concept_cards table."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


async def list_concept_cards(client: Client, category: Optional[str] = None) -> List[Dict[str, Any]]:
    """Cards newest first, optionally for one category ("All" means no filter)."""
    query = client.table("concept_cards").select("*")
    if category and category != "All":
        query = query.eq("category", category)
    query = query.order("created_at", desc=True)
    try:
        response = await asyncio.to_thread(lambda: query.execute())
    except Exception as e:
        logger.error("Failed to list concept cards: %s", e)
        return []
    return response.data or []


async def add_concept_card(
    client: Client,
    title: str,
    content: str,
    category: str,
    color_gradient: str,
) -> Dict[str, Any]:
    """Store a card; the unsaved record is returned if the insert fails."""
    record: Dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "title": title,
        "content": content,
        "category": category,
        "color_gradient": color_gradient,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        response = await asyncio.to_thread(
            lambda: client.table("concept_cards").insert(record).execute()
        )
    except Exception as e:
        logger.warning("Insert concept card failed, returning local record: %s", e)
        return record
    if response.data:
        return response.data[0]
    return record


async def update_concept_card(
    client: Client, card_id: str, updates: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Apply field updates. Returns the updated row or None if not found."""
    response = await asyncio.to_thread(
        lambda: client.table("concept_cards")
        .update(updates)
        .eq("id", str(card_id))
        .execute()
    )
    if response.data:
        return response.data[0]
    return None


async def delete_concept_card(client: Client, card_id: str) -> bool:
    """Delete a card. Returns True if a row was removed."""
    response = await asyncio.to_thread(
        lambda: client.table("concept_cards").delete().eq("id", str(card_id)).execute()
    )
    return bool(response.data)
