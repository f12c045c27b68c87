"""Pydantic models for chats and chat messages."""

import json
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from study_assistant.models.classification import MAX_MESSAGE_LENGTH
from study_assistant.models.concept_card import ConceptCard


MessageRole = Literal["user", "assistant"]


class Chat(BaseModel):
    """A stored conversation."""
    id: UUID
    title: str
    model: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "protected_namespaces": ()}


class ChatCreate(BaseModel):
    """Request body for POST /api/chats."""
    title: str = Field(default="New Chat", min_length=1, max_length=200)
    model: Optional[str] = Field(default=None, description="Gemini model id; defaults to MODEL_NAME")

    model_config = {"protected_namespaces": ()}


class ChatRename(BaseModel):
    """Request body for PATCH /api/chats/{chat_id}."""
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class ChatMessage(BaseModel):
    """A stored chat message."""
    id: Optional[UUID] = None
    chat_id: UUID
    role: MessageRole
    content: str
    created_at: Optional[datetime] = None
    attachments: Optional[List[str]] = None

    model_config = {"from_attributes": True}

    @field_validator("attachments", mode="before")
    @classmethod
    def decode_attachments(cls, v: object) -> object:
        # Stored as a JSON string in the messages table
        if isinstance(v, str):
            try:
                decoded = json.loads(v)
            except json.JSONDecodeError:
                return [v]
            return decoded if isinstance(decoded, list) else [str(decoded)]
        return v


class MessageCreate(BaseModel):
    """Request body for POST /api/chats/{chat_id}/messages."""
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH, description="User message text")
    model: Optional[str] = Field(default=None, description="Override the chat's model for this reply")
    attachments: Optional[List[str]] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)

    model_config = {"protected_namespaces": ()}

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class ChatReply(BaseModel):
    """Outcome of one model round-trip for a user message."""
    content: str
    model: Optional[str] = None
    is_educational: bool = False
    repaired: bool = False
    subject: Optional[str] = None
    topic: Optional[str] = None
    error: Optional[str] = None

    model_config = {"protected_namespaces": ()}


class ExchangeResponse(BaseModel):
    """Response body for POST /api/chats/{chat_id}/messages."""
    user_message: ChatMessage
    assistant_message: ChatMessage
    reply: ChatReply
    concept_card: Optional[ConceptCard] = None
    chat_title: Optional[str] = None
