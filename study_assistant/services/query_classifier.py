"""Rule-based classification of chat messages.

Decides whether a user message is an academic question that should get the
structured answer template, as opposed to casual conversation or an image
analysis request. Everything here is pure string/regex work: no I/O, no
randomness, and no input makes it raise.

Checks run in this order:

1. Empty message / image-analysis phrases (never educational)
2. Explicit template markers (always educational)
3. Keyword, question-pattern and math signals, vetoed by casual phrasing
"""

import re
from typing import Tuple


# ---------------------------------------------------------------------------
# Short-circuits
# ---------------------------------------------------------------------------

IMAGE_ANALYSIS_PHRASES: Tuple[str, ...] = (
    "analyze this image",
    "what is in this image",
    "describe this image",
    "can you tell me about this image",
)

EXPLICIT_TEMPLATE_MARKERS: Tuple[str, ...] = (
    "template",
    "format",
    "subject:",
    "topic:",
    "question:",
    "education",
    "study quest",
    "homework",
)


# ---------------------------------------------------------------------------
# Scoring signals
# ---------------------------------------------------------------------------

# Duplicates are collapsed so match_count counts distinct keywords.
EDUCATIONAL_KEYWORDS: Tuple[str, ...] = tuple(dict.fromkeys(k.lower() for k in (
    # Question types
    "calculate", "solve", "explain", "what is", "how does", "why does",
    "define", "describe", "compare", "contrast", "analyze", "evaluate",
    "find", "compute", "determine", "prove", "show", "demonstrate",

    # Subjects
    "physics", "chemistry", "biology", "math", "mathematics", "history",
    "geography", "science", "economics", "psychology", "sociology",
    "philosophy", "engineering", "computer science", "programming",
    "literature", "language", "grammar", "algebra", "geometry",

    # Academic terms
    "formula", "equation", "theory", "law", "principle", "concept",
    "problem", "solution", "homework", "assignment", "exam", "test", "quiz",
    "lecture", "class", "course", "curriculum", "textbook", "chapter",
    "study", "learning", "education", "academic", "school", "college", "university",

    # Common educational phrases
    "help me understand", "explain concept", "need help with", "struggling with",
    "how to solve", "show steps", "an aqueous solution", "show solution",
    "show working", "step by step",
)))

_QUESTION_START = re.compile(
    r"^(what|why|how|when|where|who|which|explain|define|describe|calculate)",
    re.IGNORECASE,
)
_INSTRUCTION_START = re.compile(
    r"^(find|solve|compute|determine|analyze)",
    re.IGNORECASE,
)

_MATH_PATTERNS = (
    re.compile(r"\d+\s*[+\-*/^]\s*\d+"),  # arithmetic
    re.compile(r"\([^)]*\)"),             # parentheses
    re.compile(r"\d+\s*="),               # equation
)

_CASUAL_PATTERNS = (
    re.compile(
        r"^(hi|hello|hey|good morning|good afternoon|thanks|thank you|how are you|what's up)",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(can you|could you|would you|will you) (help|assist|create|make|generate|write|draft)",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(tell me about|what do you think|what's your opinion|do you like)",
        re.IGNORECASE,
    ),
)
_CASUAL_WORDS: Tuple[str, ...] = ("chat", "talk", "conversation")


def is_image_analysis_request(message: str) -> bool:
    """True if the message asks about an attached image."""
    lower = message.lower()
    return any(phrase in lower for phrase in IMAGE_ANALYSIS_PHRASES)


def has_explicit_marker(message: str) -> bool:
    """True if the message explicitly asks for the structured template."""
    lower = message.lower()
    return any(marker in lower for marker in EXPLICIT_TEMPLATE_MARKERS)


def count_educational_keywords(message: str) -> int:
    """Number of distinct educational keywords found anywhere in the message."""
    lower = message.lower()
    return sum(1 for keyword in EDUCATIONAL_KEYWORDS if keyword in lower)


def has_question_pattern(message: str) -> bool:
    """True if the message opens with a question or instruction word."""
    lower = message.lower()
    return bool(_QUESTION_START.search(lower) or _INSTRUCTION_START.search(lower))


def has_math_content(message: str) -> bool:
    """True if the raw message holds arithmetic, parentheses or an equation."""
    return any(pattern.search(message) for pattern in _MATH_PATTERNS)


def is_casual_conversation(message: str) -> bool:
    """True for greetings, generic help/creation requests and opinion seeking."""
    lower = message.lower()
    if any(pattern.search(lower) for pattern in _CASUAL_PATTERNS):
        return True
    return any(word in lower for word in _CASUAL_WORDS)


def is_educational_query(message: str) -> bool:
    """Decide whether a message should be answered with the academic template.

    Args:
        message: Raw user message (markdown, punctuation and emoji allowed).

    Returns:
        True when the message is an academic question. Image-analysis
        requests are never educational; explicit template markers always
        are; otherwise keyword/question/math signals decide and casual
        phrasing vetoes them.
    """
    if not message:
        return False

    if is_image_analysis_request(message):
        return False

    if has_explicit_marker(message):
        return True

    match_count = count_educational_keywords(message)
    has_keyword = match_count > 0

    is_educational = (
        (has_keyword and has_question_pattern(message))
        or has_math_content(message)
        or match_count >= 2
    )

    if is_casual_conversation(message):
        return False

    return is_educational


# ---------------------------------------------------------------------------
# Secondary classifiers
# ---------------------------------------------------------------------------

FACTUAL_PHRASES: Tuple[str, ...] = ("what is", "define", "explain", "how does", "why does")


def is_factual_query(message: str) -> bool:
    """True if the message asks for facts and deserves a low-temperature answer."""
    lower = message.lower()
    return any(phrase in lower for phrase in FACTUAL_PHRASES)


_CONCEPT_QUERY_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"^what (is|are|was|were) ",
    r"^how (does|do|can|could|did) ",
    r"^why (is|are|does|do|did) ",
    r"^explain ",
    r"^describe ",
    r"^tell me about ",
    r"^define ",
    r"can you (explain|describe|tell me about) ",
    r"difference between .* and ",
    r"meaning of ",
    r"definition of ",
    r" vs ",
    r"compared to ",
    r"relationship between ",
    r"purpose of ",
    r"function of ",
    r"example of ",
    r"characteristics of ",
    r"properties of ",
    r"features of ",
    r"aspects of ",
    r"origins of ",
    r"history of ",
    r"concept of ",
    r"theory of ",
    r"significance of ",
    r"importance of ",
    r"applications of ",
    r"uses of ",
    r"types of ",
    r"categories of ",
    r"classification of ",
    r"process of ",
    r"method of ",
    r"technique of ",
    r"approach to ",
    r"basics of ",
    r"fundamentals of ",
    r"principles of ",
    r"rules of ",
    r"guidelines for ",
    r"summary of ",
    r"overview of ",
    r"introduction to ",
))


def is_concept_query(message: str) -> bool:
    """True if the message asks about a concept worth turning into a card."""
    cleaned = message.strip().lower()
    return any(pattern.search(cleaned) for pattern in _CONCEPT_QUERY_PATTERNS)
