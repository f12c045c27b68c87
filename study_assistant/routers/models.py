"""Gemini model picker API."""

from typing import List

from fastapi import APIRouter

from study_assistant.config import get_settings
from study_assistant.models.gemini_model import GeminiModelInfo
from study_assistant.services.gemini_client import get_gemini_client
from study_assistant.services.model_catalog import list_available_models

router = APIRouter(prefix="/api/models", tags=["models"])


@router.get("", response_model=List[GeminiModelInfo])
async def get_models() -> List[GeminiModelInfo]:
    """Gemini models available for chat, newest and most capable first."""
    settings = get_settings()
    fallback_ids = (settings.model_name, *settings.fallback_models)
    return await list_available_models(get_gemini_client(), fallback_ids)
