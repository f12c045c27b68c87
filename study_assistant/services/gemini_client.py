"""Gemini API client initialization and text generation helpers.

Uses the modern google-genai SDK (not google.generativeai).
"""

import asyncio
from typing import Iterable, List, Optional

from google import genai
from google.genai import types

from study_assistant.config import get_settings
from study_assistant.models.chat import ChatMessage
from study_assistant.utils.retry import retry_with_backoff


def get_gemini_client() -> genai.Client:
    """Initialize and return a Gemini API client.

    The client reads the GEMINI_API_KEY from the application settings.
    Settings validation ensures the API key is present at startup.

    Returns:
        genai.Client: Initialized Gemini client ready for API calls.

    Raises:
        ValueError: If GEMINI_API_KEY is not set in environment.

    Example:
        >>> client = get_gemini_client()
        >>> response = client.models.generate_content(
        ...     model="gemini-2.0-flash",
        ...     contents=["Hello world"]
        ... )
    """
    settings = get_settings()

    if not settings.gemini_api_key:
        raise ValueError(
            "GEMINI_API_KEY not set in environment. "
            "Please set this variable in your .env file or environment."
        )

    return genai.Client(api_key=settings.gemini_api_key)


def to_gemini_contents(history: Iterable[ChatMessage], prompt: str) -> List[types.Content]:
    """Convert stored chat history plus the new prompt into Gemini contents.

    Assistant turns map to the ``model`` role. Blank history entries are
    skipped because Gemini rejects empty parts.
    """
    contents: List[types.Content] = []
    for message in history:
        if not message.content or not message.content.strip():
            continue
        contents.append(
            types.Content(
                role="user" if message.role == "user" else "model",
                parts=[types.Part.from_text(text=message.content)],
            )
        )
    contents.append(types.Content(role="user", parts=[types.Part.from_text(text=prompt)]))
    return contents


@retry_with_backoff()
async def generate_text(
    client: genai.Client,
    model: str,
    contents: str | List[types.Content],
    config: Optional[types.GenerateContentConfig] = None,
) -> str:
    """Run one generate_content call off the event loop and return its text.

    Raises:
        ValueError: If Gemini returns no text (e.g. a blocked response).
        google.genai.errors.APIError: For API failures left after retries.
    """
    response = await asyncio.to_thread(
        lambda: client.models.generate_content(model=model, contents=contents, config=config)
    )
    text = response.text
    if not text or not text.strip():
        raise ValueError(f"Gemini model {model} returned an empty response")
    return text
