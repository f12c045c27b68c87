"""Tests for chat reply orchestration (Gemini calls are mocked)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from study_assistant.config import get_settings
from study_assistant.services.chat_service import (
    EDUCATIONAL_ERROR_SOLUTION,
    EMPTY_INPUT_REPLY,
    FOCUSED_TEMPERATURE,
    GENERIC_ERROR_REPLY,
    build_generation_config,
    generate_reply,
    model_chain,
    prepare_prompt,
)
from study_assistant.services.response_template import create_response_template, is_template_compliant

EDUCATIONAL_MESSAGE = "Explain the motion of a projectile"


@pytest.fixture
def settings(mock_env_vars):
    return get_settings()


@pytest.fixture
def gemini():
    return MagicMock()


class TestModelChain:

    def test_requested_model_first_without_repeats(self):
        assert model_chain("gemini-1.5-pro", ("gemini-2.0-flash", "gemini-1.5-pro")) == (
            "gemini-1.5-pro",
            "gemini-2.0-flash",
        )

    def test_no_requested_model(self):
        assert model_chain(None, ("a", "b")) == ("a", "b")


class TestPreparePrompt:

    def test_educational_message_gets_template_prompt(self):
        prompt, query, is_factual = prepare_prompt(EDUCATIONAL_MESSAGE)
        assert query is not None
        assert query.subject == "Physics"
        assert "YOU MUST RESPOND USING THIS EXACT TEMPLATE FORMAT" in prompt
        assert is_factual is True

    def test_casual_message_is_sent_as_is(self):
        assert prepare_prompt("Hello there") == ("Hello there", None, False)


class TestGenerationConfig:

    def test_focused_temperature_for_educational(self):
        config = build_generation_config(is_factual=False, is_educational=True, temperature=0.9)
        assert config.temperature == FOCUSED_TEMPERATURE
        assert config.max_output_tokens == 1024

    def test_factual_settings(self):
        config = build_generation_config(is_factual=True, is_educational=False, temperature=0.9)
        assert config.temperature == FOCUSED_TEMPERATURE
        assert config.top_k == 20
        assert config.max_output_tokens == 2048

    def test_casual_uses_requested_temperature(self):
        config = build_generation_config(is_factual=False, is_educational=False, temperature=0.9)
        assert config.temperature == 0.9


class TestGenerateReply:

    @pytest.mark.asyncio
    async def test_empty_message(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            reply = await generate_reply(gemini, "   ", settings)

        assert reply.content == EMPTY_INPUT_REPLY
        mock_generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_casual_reply_passes_through(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.return_value = "Hi! How can I help?"
            reply = await generate_reply(gemini, "Hello there", settings)

        assert reply.content == "Hi! How can I help?"
        assert reply.model == settings.model_name
        assert reply.is_educational is False
        assert reply.repaired is False
        assert reply.error is None

    @pytest.mark.asyncio
    async def test_non_compliant_educational_reply_is_repaired(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.return_value = "A projectile follows a parabolic path under gravity alone."
            reply = await generate_reply(gemini, EDUCATIONAL_MESSAGE, settings)

        assert reply.is_educational is True
        assert reply.repaired is True
        assert reply.subject == "Physics"
        assert reply.topic == "Kinematics"
        assert is_template_compliant(reply.content)
        mock_generate.assert_called_once()

    @pytest.mark.asyncio
    async def test_compliant_educational_reply_is_kept(self, gemini, settings):
        document = create_response_template(
            "Physics", "Kinematics", "the motion of a projectile", "Step 1: resolve the velocity"
        )
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.return_value = document
            reply = await generate_reply(gemini, EDUCATIONAL_MESSAGE, settings)

        assert reply.content == document
        assert reply.repaired is False

    @pytest.mark.asyncio
    async def test_falls_back_to_next_model(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.side_effect = [Exception("404 model not found"), "Hello!"]
            reply = await generate_reply(gemini, "Hello there", settings, model="gemini-exp")

        assert reply.content == "Hello!"
        assert reply.model == "gemini-2.0-flash"
        assert mock_generate.call_args_list[0].args[1] == "gemini-exp"
        assert mock_generate.call_args_list[1].args[1] == "gemini-2.0-flash"

    @pytest.mark.asyncio
    async def test_all_models_fail_for_educational_message(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.side_effect = Exception("quota exhausted")
            reply = await generate_reply(gemini, EDUCATIONAL_MESSAGE, settings)

        assert reply.error == "all_models_failed"
        assert reply.model is None
        assert is_template_compliant(reply.content)
        assert EDUCATIONAL_ERROR_SOLUTION in reply.content
        assert mock_generate.call_count == len(settings.fallback_models)

    @pytest.mark.asyncio
    async def test_all_models_fail_for_casual_message(self, gemini, settings):
        with patch("study_assistant.services.chat_service.generate_text", new_callable=AsyncMock) as mock_generate:
            mock_generate.side_effect = Exception("quota exhausted")
            reply = await generate_reply(gemini, "Hello there", settings)

        assert reply.content == GENERIC_ERROR_REPLY
        assert reply.error == "all_models_failed"
