"""Isolate the literal question, or the main concept, from a user message."""

import re


_QUESTION_PATTERNS = (
    # Anything ending with "?", after an optional polite prefix
    re.compile(r"(?:can you|could you|please)?\s*(.+\?)", re.IGNORECASE),
    # Text after a common question or instruction word
    re.compile(
        r"(?:what|how|why|when|who|where|which|explain|calculate|find|solve|determine)\s+(.+)",
        re.IGNORECASE,
    ),
)


def extract_question(text: str) -> str:
    """Return the question part of a message.

    Falls back to the trimmed message when no question can be isolated, so
    the result is never empty for non-blank input.
    """
    stripped = text.strip()
    if stripped.endswith("?"):
        return stripped

    for pattern in _QUESTION_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1).strip()

    return stripped


# ---------------------------------------------------------------------------
# Concept titles
# ---------------------------------------------------------------------------

_CONCEPT_PREFIXES = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"^what (is|are|was|were) ",
    r"^how (does|do|can|could|did) ",
    r"^why (is|are|does|do|did) ",
    r"^explain ",
    r"^describe ",
    r"^tell me about ",
    r"^define ",
    r"^can you (explain|describe|tell me about) ",
    r"^I want to know about ",
    r"^I'd like to learn about ",
    r"^Could you explain ",
    r"^Please explain ",
    r"^Please tell me about ",
    r"^I'm curious about ",
    r"^I've been wondering about ",
))

MAX_TITLE_LENGTH = 60
MIN_NATURAL_BREAK = 30
_TRAILING_PUNCTUATION = re.compile(r"[?,.;:!]$")


def extract_main_concept(message: str) -> str:
    """Turn an educational question into a short concept-card title.

    Example:
        >>> extract_main_concept("What is photosynthesis?")
        'Photosynthesis'
    """
    title = message.strip()
    # Prefixes are stripped in sequence, each at most once
    for prefix in _CONCEPT_PREFIXES:
        title = prefix.sub("", title, count=1)

    if len(title) > MAX_TITLE_LENGTH:
        natural_break = title[:MAX_TITLE_LENGTH].rfind(" ")
        if natural_break > MIN_NATURAL_BREAK:
            title = title[:natural_break]
        else:
            title = title[:MAX_TITLE_LENGTH]

    title = _TRAILING_PUNCTUATION.sub("", title).strip()
    return title[:1].upper() + title[1:]
