"""Tests for chat title generation."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from study_assistant.services.title_generator import (
    clean_title,
    fallback_title,
    generate_chat_title,
    is_valid_title,
)


@pytest.mark.parametrize("raw,expected", [
    ('"Projectile Motion Basics"', "Projectile Motion Basics"),
    ("Title: Newton's Laws.", "Newton's Laws"),
    ("  chat title: Cell Division  ", "Cell Division"),
    ("Acid Base Reactions", "Acid Base Reactions"),
])
def test_clean_title(raw, expected):
    assert clean_title(raw) == expected


@pytest.mark.parametrize("title,valid", [
    ("Projectile Motion", True),
    ("", False),
    ("Hi", False),
    ("x" * 51, False),
    ("New Conversation about gravity", False),
])
def test_is_valid_title(title, valid):
    assert is_valid_title(title) is valid


def test_fallback_title_format():
    assert fallback_title(datetime(2025, 3, 7, 14, 5)) == "Chat 3/7/2025, 02:05 PM"


def _gemini(text=None, error=None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = MagicMock(text=text)
    return client


@pytest.mark.asyncio
async def test_generate_chat_title_cleans_response():
    client = _gemini('"Projectile Motion Basics."')

    title = await generate_chat_title(client, "Explain projectile motion", "gemini-2.0-flash")

    assert title == "Projectile Motion Basics"
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.0-flash"
    assert "Explain projectile motion" in kwargs["contents"]


@pytest.mark.asyncio
async def test_generate_chat_title_api_error_uses_timestamp():
    title = await generate_chat_title(_gemini(error=Exception("quota")), "hello", "gemini-2.0-flash")
    assert title.startswith("Chat ")


@pytest.mark.asyncio
async def test_generate_chat_title_rejects_invalid_title():
    title = await generate_chat_title(_gemini("New conversation"), "hello", "gemini-2.0-flash")
    assert title.startswith("Chat ")
