"""CRUD for the todos table."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


async def list_todos(client: Client) -> List[Dict[str, Any]]:
    """All todos, newest first. Returns [] if the query fails."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table("todos")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to list todos: %s", e)
        return []
    return response.data or []


async def add_todo(client: Client, todo: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a todo; the id and created_at come from the database defaults."""
    response = await asyncio.to_thread(
        lambda: client.table("todos").insert(todo).execute()
    )
    if not response.data:
        raise RuntimeError("Insert todo returned no data")
    return response.data[0]


async def update_todo(
    client: Client, todo_id: str, updates: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Apply field updates. Returns the updated row or None if not found."""
    response = await asyncio.to_thread(
        lambda: client.table("todos")
        .update(updates)
        .eq("id", str(todo_id))
        .execute()
    )
    if response.data:
        return response.data[0]
    return None


async def delete_todo(client: Client, todo_id: str) -> bool:
    """Delete a todo. Returns True if a row was removed."""
    response = await asyncio.to_thread(
        lambda: client.table("todos").delete().eq("id", str(todo_id)).execute()
    )
    return bool(response.data)
