"""Short descriptive titles for new chats."""

import asyncio
import logging
import re
from datetime import datetime
from typing import Optional

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 500
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 50

_CLEANUPS = (
    (re.compile(r"^[\"'](.*)[\"']$"), r"\1"),
    (re.compile(r"^Title:?\s*", re.IGNORECASE), ""),
    (re.compile(r"\.$"), ""),
    (re.compile(r"Chat title:?\s*", re.IGNORECASE), ""),
)


def clean_title(raw: str) -> str:
    """Strip quotes, "Title:" prefixes and a trailing period."""
    title = raw.strip()
    for pattern, replacement in _CLEANUPS:
        title = pattern.sub(replacement, title)
    return title.strip()


def is_valid_title(title: str) -> bool:
    return (
        bool(title)
        and "new conversation" not in title.lower()
        and MIN_TITLE_LENGTH <= len(title) <= MAX_TITLE_LENGTH
    )


def fallback_title(now: Optional[datetime] = None) -> str:
    """Timestamp title, e.g. ``Chat 3/7/2025, 02:05 PM``."""
    now = now or datetime.now()
    return f"Chat {now.month}/{now.day}/{now.year}, {now.strftime('%I:%M %p')}"


async def generate_chat_title(client: genai.Client, content: str, model: str) -> str:
    """Ask Gemini for a 3-5 word title; any failure yields the timestamp title."""
    prompt = (
        "Generate a brief, descriptive chat title (3-5 words max) based on this "
        f'conversation: "{content[:MAX_CONTEXT_CHARS]}"\n'
        "The title should be specific to what the conversation is actually about.\n"
        "Return ONLY the title text with no quotes, explanation or additional formatting."
    )
    try:
        response = await asyncio.to_thread(
            lambda: client.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=0.2, max_output_tokens=50),
            )
        )
    except Exception as e:
        logger.warning("Chat title generation failed: %s", e)
        return fallback_title()

    title = clean_title(response.text or "")
    if not is_valid_title(title):
        logger.info("Rejected generated chat title %r", title)
        return fallback_title()
    return title
