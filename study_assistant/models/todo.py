"""Pydantic models for the study todo list."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


TodoPriority = Literal["low", "medium", "high"]


class Todo(BaseModel):
    """A stored todo item."""
    id: UUID
    title: str
    completed: bool = False
    priority: TodoPriority = "medium"
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TodoCreate(BaseModel):
    """Request body for POST /api/todos."""
    title: str = Field(..., min_length=1, max_length=500)
    completed: bool = False
    priority: TodoPriority = "medium"
    due_date: Optional[datetime] = None


class TodoUpdate(BaseModel):
    """Request body for PATCH /api/todos/{todo_id}. Only provided fields change."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    completed: Optional[bool] = None
    priority: Optional[TodoPriority] = None
    due_date: Optional[datetime] = None
