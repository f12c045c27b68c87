"""Discovery and ordering of the Gemini models offered in the model picker."""

import asyncio
import logging
import re
from typing import List, Sequence

from google import genai

from study_assistant.models.gemini_model import GeminiModelInfo

logger = logging.getLogger(__name__)

_VERSION = re.compile(r"(\d+\.\d+)")


def format_model_name(model_id: str) -> str:
    """``gemini-1.5-pro`` -> ``Gemini 1.5 Pro``."""
    return " ".join(part[:1].upper() + part[1:] for part in model_id.split("-"))


def is_multimodal(model_id: str) -> bool:
    return "vision" in model_id or "1.5" in model_id or "2." in model_id


def _sort_key(model: GeminiModelInfo) -> tuple:
    match = _VERSION.search(model.id)
    version = float(match.group(1)) if match else 0.0
    return (
        -version,                   # newest first
        "pro" not in model.id,      # pro before flash
        "exp" in model.id,          # stable before experimental
        model.id,
    )


def sort_models(models: Sequence[GeminiModelInfo]) -> List[GeminiModelInfo]:
    """Newest version first, then pro, then non-experimental, then by id."""
    return sorted(models, key=_sort_key)


def fallback_catalog(model_ids: Sequence[str]) -> List[GeminiModelInfo]:
    return sort_models([
        GeminiModelInfo(id=m, name=format_model_name(m), multimodal=is_multimodal(m))
        for m in dict.fromkeys(model_ids)
    ])


async def list_available_models(
    client: genai.Client, fallback_ids: Sequence[str]
) -> List[GeminiModelInfo]:
    """List Gemini models that support generateContent.

    Falls back to the configured model ids when the API cannot be reached
    or reports no Gemini models.
    """
    try:
        listed = await asyncio.to_thread(lambda: list(client.models.list()))
    except Exception as e:
        logger.warning("Listing Gemini models failed, using configured list: %s", e)
        return fallback_catalog(fallback_ids)

    models: List[GeminiModelInfo] = []
    for item in listed:
        name = getattr(item, "name", "") or ""
        if "gemini" not in name:
            continue
        actions = getattr(item, "supported_actions", None)
        if actions and "generateContent" not in actions:
            continue
        model_id = name.split("/")[-1]
        models.append(
            GeminiModelInfo(
                id=model_id,
                name=getattr(item, "display_name", None) or format_model_name(model_id),
                description=getattr(item, "description", None),
                input_token_limit=getattr(item, "input_token_limit", None),
                output_token_limit=getattr(item, "output_token_limit", None),
                multimodal=is_multimodal(model_id),
            )
        )

    if not models:
        logger.info("No Gemini models reported, using configured list")
        return fallback_catalog(fallback_ids)
    return sort_models(models)
