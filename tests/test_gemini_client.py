"""Tests for Gemini API client initialization and text generation."""

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from study_assistant.models.chat import ChatMessage
from study_assistant.services.gemini_client import generate_text, get_gemini_client, to_gemini_contents


class TestGeminiClient:
    """Test suite for Gemini client initialization."""

    def test_get_gemini_client_success(self, mock_env_vars):
        """Test successful Gemini client initialization with valid API key."""
        with patch('study_assistant.services.gemini_client.genai.Client') as mock_client:
            mock_client_instance = MagicMock()
            mock_client.return_value = mock_client_instance

            client = get_gemini_client()

            # Verify Client was called with API key
            mock_client.assert_called_once_with(api_key='test-gemini-api-key')
            assert client == mock_client_instance

    def test_get_gemini_client_missing_api_key(self, monkeypatch):
        """Test that ValidationError is raised when GEMINI_API_KEY is not set."""
        from study_assistant.config import get_settings
        get_settings.cache_clear()

        monkeypatch.delenv('GEMINI_API_KEY', raising=False)

        with pytest.raises(ValidationError) as exc_info:
            get_gemini_client()

        assert 'gemini_api_key' in str(exc_info.value)


class TestToGeminiContents:

    def test_history_roles_and_prompt(self):
        chat_id = uuid4()
        history = [
            ChatMessage(chat_id=chat_id, role="user", content="What is work?"),
            ChatMessage(chat_id=chat_id, role="assistant", content="Work is force times distance."),
            ChatMessage(chat_id=chat_id, role="assistant", content="   "),
        ]

        contents = to_gemini_contents(history, "And power?")

        assert [c.role for c in contents] == ["user", "model", "user"]
        assert contents[1].parts[0].text == "Work is force times distance."
        assert contents[-1].parts[0].text == "And power?"

    def test_no_history(self):
        contents = to_gemini_contents([], "Hello")
        assert len(contents) == 1


class TestGenerateText:

    @pytest.mark.asyncio
    async def test_returns_response_text(self):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text="Hello!")

        text = await generate_text(client, "gemini-2.0-flash", "Hi")

        assert text == "Hello!"
        client.models.generate_content.assert_called_once_with(
            model="gemini-2.0-flash", contents="Hi", config=None
        )

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text="")

        with pytest.raises(ValueError, match="empty response"):
            await generate_text(client, "gemini-2.0-flash", "Hi")

        # Empty output is not a transport error, so it is not retried
        assert client.models.generate_content.call_count == 1
