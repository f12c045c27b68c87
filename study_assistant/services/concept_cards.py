"""Concept card generation from educational chat exchanges.

A card is produced only when the user's message asks about a concept. The
card is drafted by Gemini (JSON output) and, if that fails, built locally
from the assistant's answer with a keyword-voted category. The card's
colour gradient is purely cosmetic and deliberately random.
"""

import asyncio
import json
import logging
import random
import re
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError
from supabase import Client

from study_assistant.db.concept_cards import add_concept_card
from study_assistant.models.concept_card import CARD_CATEGORIES, ConceptCard, ConceptCardDraft
from study_assistant.services.category_classifier import determine_category
from study_assistant.services.query_classifier import is_concept_query
from study_assistant.services.question_extractor import extract_main_concept

logger = logging.getLogger(__name__)

CARD_GRADIENTS = (
    "from-purple-500 to-indigo-500",
    "from-blue-500 to-teal-500",
    "from-green-500 to-teal-500",
    "from-yellow-500 to-red-500",
    "from-pink-500 to-purple-500",
    "from-indigo-500 to-blue-500",
    "from-red-500 to-pink-500",
    "from-teal-500 to-blue-500",
    "from-rose-500 to-orange-400",
    "from-emerald-500 to-lime-600",
    "from-sky-500 to-indigo-600",
    "from-amber-400 to-orange-500",
    "from-violet-600 to-indigo-600",
    "from-cyan-400 to-blue-500",
    "from-fuchsia-600 to-pink-600",
    "from-lime-500 to-green-500",
    "from-orange-500 to-red-600",
    "from-blue-400 to-violet-500",
    "from-emerald-400 to-teal-500",
    "from-rose-400 to-pink-600",
)

SUMMARY_TRIGGER_LENGTH = 500
MIN_PARAGRAPH_LENGTH = 30
MAX_PARAGRAPHS = 3
MAX_CONTENT_LENGTH = 1000

FALLBACK_CARD = ConceptCardDraft(
    title="Concept from Query",
    content="An educational concept related to your query. The AI was unable to format this properly.",
    category="Other",
)

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")
_PARAGRAPH_SPLIT = re.compile(r"\n+")


def random_gradient() -> str:
    return random.choice(CARD_GRADIENTS)


def summarize_content(ai_response: str) -> str:
    """Shorten a long answer to its first few substantial paragraphs."""
    content = ai_response.strip()
    if len(content) <= SUMMARY_TRIGGER_LENGTH:
        return content

    paragraphs = [p for p in _PARAGRAPH_SPLIT.split(content) if len(p.strip()) >= MIN_PARAGRAPH_LENGTH]
    content = "\n\n".join(paragraphs[:MAX_PARAGRAPHS])

    if len(content) > MAX_CONTENT_LENGTH:
        content = content[: MAX_CONTENT_LENGTH - 3] + "..."
    return content


def build_concept_card(title: str, user_query: str, ai_response: str) -> Optional[ConceptCardDraft]:
    """Build a card locally from the exchange. None when title or content is empty."""
    content = summarize_content(ai_response)
    if not title or not content:
        return None
    return ConceptCardDraft(
        title=title,
        content=content,
        category=determine_category(title, user_query, content),
        color_gradient=random_gradient(),
    )


def _card_prompt(topic: str) -> str:
    return f"""Generate educational content for a concept card based on this query: "{topic}"

Format the response as JSON with these fields:
{{
  "title": "A concise, memorable title for this concept",
  "content": "Clear, concise explanation (2-3 paragraphs)",
  "category": "One of: Physics, Chemistry, Biology, Other"
}}

The category MUST be exactly one of: "Physics", "Chemistry", "Biology", or "Other".
Use Physics for physical sciences, Chemistry for chemical sciences, Biology for life sciences, and Other for everything else."""


def parse_card_response(text: str) -> ConceptCardDraft:
    """Parse Gemini's card JSON; falls back to a placeholder card if unusable.

    An out-of-vocabulary category is replaced with "Other" rather than
    rejected.
    """
    match = _JSON_BLOCK.search(text)
    if not match:
        logger.warning("No JSON found in concept card response")
        return FALLBACK_CARD

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning("Concept card JSON decode failed: %s; snippet: %s", e, text[:200])
        return FALLBACK_CARD

    if not isinstance(data, dict) or not data.get("title") or not data.get("content") or not data.get("category"):
        logger.warning("Concept card response missing required fields")
        return FALLBACK_CARD

    category = data["category"] if data["category"] in CARD_CATEGORIES else "Other"
    try:
        return ConceptCardDraft(
            title=str(data["title"]),
            content=str(data["content"]),
            category=category,
        )
    except ValidationError as e:
        logger.warning("Concept card failed validation: %s", e)
        return FALLBACK_CARD


async def generate_concept_card(
    client: genai.Client,
    topic: str,
    model: str,
) -> Optional[ConceptCardDraft]:
    """Ask Gemini to draft a card. Returns None when the API call itself fails."""
    try:
        response = await asyncio.to_thread(
            lambda: client.models.generate_content(
                model=model,
                contents=_card_prompt(topic),
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
        )
    except Exception as e:
        logger.error("Concept card generation failed with %s: %s", model, e)
        return None
    return parse_card_response(response.text or "")


async def process_exchange(
    gemini: genai.Client,
    supabase: Client,
    user_message: str,
    ai_response: str,
    model: str,
) -> Optional[ConceptCard]:
    """Create and store a concept card for an exchange, if it deserves one.

    Args:
        gemini: Gemini client used to draft the card
        supabase: Supabase client used to store it
        user_message: The user's message
        ai_response: The assistant's reply
        model: Gemini model used for drafting

    Returns:
        The stored ConceptCard, or None for non-concept questions.
    """
    if not is_concept_query(user_message):
        logger.debug("Not a concept query, skipping concept card")
        return None

    title = extract_main_concept(user_message)
    local_card = build_concept_card(title, user_message.strip(), ai_response)
    if local_card is None:
        return None

    draft = await generate_concept_card(gemini, title, model)
    if draft is None or draft == FALLBACK_CARD:
        logger.info("Using locally built concept card for %r", title)
        draft = local_card

    row = await add_concept_card(
        supabase,
        title=draft.title,
        content=draft.content,
        category=draft.category,
        color_gradient=draft.color_gradient or random_gradient(),
    )
    logger.info("Concept card stored: %s (%s)", row.get("id"), draft.category)
    return ConceptCard.model_validate(row)
