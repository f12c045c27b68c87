"""Todo list API."""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Response, status

from study_assistant.db.supabase_client import get_supabase_client
from study_assistant.db.todos import add_todo, delete_todo, list_todos, update_todo
from study_assistant.models.todo import Todo, TodoCreate, TodoUpdate
from study_assistant.routers.chats import _validate_uuid

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=List[Todo])
async def get_todos() -> List[Dict[str, Any]]:
    return await list_todos(get_supabase_client())


@router.post("", response_model=Todo, status_code=status.HTTP_201_CREATED)
async def post_todo(body: TodoCreate) -> Dict[str, Any]:
    """Create a todo."""
    try:
        return await add_todo(get_supabase_client(), body.model_dump(mode="json"))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}",
        )


@router.patch("/{todo_id}", response_model=Todo)
async def patch_todo(todo_id: str, body: TodoUpdate) -> Dict[str, Any]:
    """Update the given fields of a todo (e.g. toggle completed)."""
    todo_id = _validate_uuid(todo_id, "todo_id")
    updates = body.model_dump(mode="json", exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    row = await update_todo(get_supabase_client(), todo_id, updates)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Todo not found: {todo_id}")
    return row


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_todo(todo_id: str) -> Response:
    todo_id = _validate_uuid(todo_id, "todo_id")
    if not await delete_todo(get_supabase_client(), todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Todo not found: {todo_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
