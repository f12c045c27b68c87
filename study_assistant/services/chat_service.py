"""Chat orchestration: classify, prompt Gemini, enforce the answer template.

Per user message:

1. Classify the message (educational / factual / plain).
2. Build the prompt: forced template, factual accuracy note, or as-is.
3. Call Gemini, walking the model fallback chain on transport errors.
4. For templated messages, check compliance and repair locally.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from study_assistant.config import Settings
from study_assistant.models.chat import ChatMessage, ChatReply
from study_assistant.models.classification import EducationalQuery
from study_assistant.services.gemini_client import generate_text, to_gemini_contents
from study_assistant.services.query_classifier import is_educational_query, is_factual_query
from study_assistant.services.response_template import (
    SYSTEM_INSTRUCTION,
    build_factual_prompt,
    build_template_prompt,
    create_response_template,
    ensure_template,
)
from study_assistant.services.subject_detector import parse_educational_query

logger = logging.getLogger(__name__)

EMPTY_INPUT_REPLY = "I need some input to respond to. Please provide a question or message."
GENERIC_ERROR_REPLY = (
    "I encountered an error while generating a response. "
    "Please try again or rephrase your question."
)
EDUCATIONAL_ERROR_SOLUTION = (
    "I encountered an error processing your request, but here is some general "
    "guidance for this type of question."
)

# Focused sampling for educational and factual answers
FOCUSED_TEMPERATURE = 0.2


def build_generation_config(
    is_factual: bool,
    is_educational: bool,
    temperature: float,
) -> types.GenerateContentConfig:
    """Sampling settings for a reply.

    Educational and factual questions get a low temperature; factual ones
    also get tighter top-k/top-p and a larger output budget.
    """
    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=FOCUSED_TEMPERATURE if (is_factual or is_educational) else temperature,
        top_k=20 if is_factual else 40,
        top_p=0.8 if is_factual else 0.95,
        max_output_tokens=2048 if is_factual else 1024,
    )


def model_chain(requested: Optional[str], fallbacks: Sequence[str]) -> Tuple[str, ...]:
    """Requested model first, then the configured fallbacks, without repeats."""
    ordered = ([requested] if requested else []) + list(fallbacks)
    return tuple(dict.fromkeys(m for m in ordered if m))


def prepare_prompt(message: str) -> Tuple[str, Optional[EducationalQuery], bool]:
    """Return ``(prompt, educational_query_or_None, is_factual)`` for a message."""
    is_factual = is_factual_query(message)
    if is_educational_query(message):
        query = parse_educational_query(message)
        return build_template_prompt(query), query, is_factual
    if is_factual:
        return build_factual_prompt(message), None, True
    return message, None, False


async def generate_reply(
    client: genai.Client,
    message: str,
    settings: Settings,
    history: Sequence[ChatMessage] = (),
    model: Optional[str] = None,
    temperature: Optional[float] = None,
) -> ChatReply:
    """Produce the assistant reply for one user message.

    Never raises for model failures: when every model in the chain fails,
    educational questions still get a (generic) template answer and other
    messages get a plain apology.

    Args:
        client: Gemini client
        message: The new user message
        settings: Application settings (model chain, default temperature)
        history: Earlier messages of the chat, oldest first
        model: Requested model id; defaults to settings.model_name
        temperature: Requested temperature for casual replies

    Returns:
        ChatReply with the content and routing details
    """
    if not message or not message.strip():
        return ChatReply(content=EMPTY_INPUT_REPLY)

    prompt, query, is_factual = await asyncio.to_thread(prepare_prompt, message)
    is_educational = query is not None
    logger.info(
        "Message classified: educational=%s factual=%s forced_template=%s",
        is_educational, is_factual, bool(query and query.forced_template),
    )

    config = build_generation_config(
        is_factual=is_factual,
        is_educational=is_educational,
        temperature=temperature if temperature is not None else settings.default_temperature,
    )
    contents = to_gemini_contents(history, prompt)

    errors: List[str] = []
    for candidate in model_chain(model or settings.model_name, settings.fallback_models):
        try:
            text = await generate_text(client, candidate, contents, config)
        except Exception as e:
            logger.warning("Model %s failed, trying next fallback: %s", candidate, e)
            errors.append(f"{candidate}: {e}")
            continue

        if query is None:
            return ChatReply(content=text, model=candidate)

        content, repaired = ensure_template(text, query)
        if repaired:
            logger.info("Reply from %s did not follow the template; repaired locally", candidate)
        return ChatReply(
            content=content,
            model=candidate,
            is_educational=True,
            repaired=repaired,
            subject=query.subject,
            topic=query.topic,
        )

    logger.error("All models failed for message: %s", "; ".join(errors))
    if query is not None:
        return ChatReply(
            content=create_response_template(
                query.subject, query.topic, query.question, EDUCATIONAL_ERROR_SOLUTION
            ),
            is_educational=True,
            subject=query.subject,
            topic=query.topic,
            error="all_models_failed",
        )
    return ChatReply(content=GENERIC_ERROR_REPLY, error="all_models_failed")
