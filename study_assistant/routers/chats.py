"""
Chat API endpoints.

Chats and their messages, plus the main exchange endpoint that stores the
user's message, gets the assistant reply from Gemini, and opportunistically
creates a concept card and a chat title.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from study_assistant.config import get_settings
from study_assistant.db.chats import create_chat, delete_chat, get_chat, list_chats, rename_chat, touch_chat
from study_assistant.db.messages import add_message, list_messages
from study_assistant.db.supabase_client import get_supabase_client
from study_assistant.middleware.rate_limit import RATE_LIMITS, get_limiter
from study_assistant.models.chat import (
    Chat,
    ChatCreate,
    ChatMessage,
    ChatRename,
    ExchangeResponse,
    MessageCreate,
)
from study_assistant.models.concept_card import ConceptCard
from study_assistant.services.chat_service import generate_reply
from study_assistant.services.concept_cards import process_exchange
from study_assistant.services.gemini_client import get_gemini_client
from study_assistant.services.title_generator import generate_chat_title

router = APIRouter(prefix="/api/chats", tags=["chats"])
limiter = get_limiter()
logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New Chat"


def _validate_uuid(value: str, label: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} format: {value}",
        )


@router.get("", response_model=List[Chat])
async def get_chats() -> List[Dict[str, Any]]:
    """All chats, most recently updated first."""
    return await list_chats(get_supabase_client())


@router.post("", response_model=Chat, status_code=status.HTTP_201_CREATED)
async def post_chat(body: ChatCreate) -> Dict[str, Any]:
    """Create a chat."""
    settings = get_settings()
    return await create_chat(get_supabase_client(), body.title, body.model or settings.model_name)


@router.patch("/{chat_id}", response_model=Chat)
async def patch_chat(chat_id: str, body: ChatRename) -> Dict[str, Any]:
    """Rename a chat. 404 if it does not exist."""
    chat_id = _validate_uuid(chat_id, "chat_id")
    try:
        row = await rename_chat(get_supabase_client(), chat_id, body.title)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}",
        )
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Chat not found: {chat_id}")
    return row


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_chat(chat_id: str) -> Response:
    """Delete a chat and all of its messages."""
    chat_id = _validate_uuid(chat_id, "chat_id")
    if not await delete_chat(get_supabase_client(), chat_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete chat: {chat_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{chat_id}/messages", response_model=List[ChatMessage])
async def get_messages(chat_id: str) -> List[Dict[str, Any]]:
    """Messages of a chat, oldest first."""
    chat_id = _validate_uuid(chat_id, "chat_id")
    return await list_messages(get_supabase_client(), chat_id)


@router.post("/{chat_id}/messages", status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["chat"])  # type: ignore[untyped-decorator]
async def post_message(request: Request, chat_id: str, body: MessageCreate) -> Response:
    """
    Send a user message and get the assistant's reply.

    Flow:
    1. Store the user message
    2. Generate the reply (template enforced for educational questions)
    3. Store the reply
    4. Create a concept card for concept questions (if enabled)
    5. Title the chat after its first exchange (if enabled)

    Returns:
        201: ExchangeResponse JSON, with X-Educational-Query,
             X-Template-Repaired and X-Model-Used headers
        400: Invalid chat_id
        404: Chat not found
    """
    chat_id = _validate_uuid(chat_id, "chat_id")
    settings = get_settings()
    supabase = get_supabase_client()

    try:
        chat = await get_chat(supabase, chat_id)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}",
        )
    if chat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Chat not found: {chat_id}")

    history = [ChatMessage.model_validate(row) for row in await list_messages(supabase, chat_id)]
    user_row = await add_message(supabase, chat_id, "user", body.content, body.attachments)

    gemini = get_gemini_client()
    reply = await generate_reply(
        gemini,
        body.content,
        settings,
        history=history,
        model=body.model or chat.get("model"),
        temperature=body.temperature,
    )

    assistant_row = await add_message(supabase, chat_id, "assistant", reply.content)
    await touch_chat(supabase, chat_id)

    card: Optional[ConceptCard] = None
    if settings.enable_concept_cards and reply.error is None:
        try:
            card = await process_exchange(
                gemini, supabase, body.content, reply.content, settings.concept_card_model
            )
        except Exception as e:
            logger.error("Concept card processing failed for chat %s: %s", chat_id, e)

    new_title: Optional[str] = None
    if settings.enable_auto_titles and not history and chat.get("title") in (None, "", DEFAULT_CHAT_TITLE):
        new_title = await generate_chat_title(
            gemini, f"{body.content}\n{reply.content}", settings.title_model
        )
        try:
            await rename_chat(supabase, chat_id, new_title)
        except Exception as e:
            logger.warning("Failed to store generated title for chat %s: %s", chat_id, e)

    payload = ExchangeResponse(
        user_message=ChatMessage.model_validate(user_row),
        assistant_message=ChatMessage.model_validate(assistant_row),
        reply=reply,
        concept_card=card,
        chat_title=new_title,
    )
    return JSONResponse(
        content=payload.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
        headers={
            "X-Educational-Query": str(reply.is_educational).lower(),
            "X-Template-Repaired": str(reply.repaired).lower(),
            "X-Model-Used": reply.model or "none",
        },
    )
