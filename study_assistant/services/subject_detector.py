"""Subject and topic detection for educational questions.

The detector walks an ordered rule table: the first subject whose pattern
matches wins, then the first of that subject's topic rules that matches.
Rule order is significant and mirrors the order the chat UI has always
used (e.g. Newton's Laws is tested before Gravitation).
"""

import re
from typing import Pattern, Tuple

from study_assistant.models.classification import (
    DEFAULT_SUBJECT,
    DEFAULT_TOPIC,
    EducationalQuery,
    SubjectTopic,
)
from study_assistant.services.question_extractor import extract_question


TopicRule = Tuple[Pattern[str], str]
SubjectRule = Tuple[Pattern[str], str, Tuple[TopicRule, ...]]


def _rx(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


SUBJECT_RULES: Tuple[SubjectRule, ...] = (
    (
        _rx(r"physics|motion|force|energy|gravity|momentum|mechanics|electromagnet|wave|optic"),
        "Physics",
        (
            (_rx(r"motion|velocity|acceleration|displacement|kinematics"), "Kinematics"),
            (_rx(r"force|newton|law of motion"), "Newton's Laws"),
            (_rx(r"energy|work|power|conservation"), "Work and Energy"),
            (_rx(r"gravity|gravitational"), "Gravitation"),
            (_rx(r"electricity|magnetic|electromagnet"), "Electromagnetism"),
        ),
    ),
    (
        _rx(r"chemistry|element|compound|reaction|acid|base|organic|molecule|atom|bond"),
        "Chemistry",
        (
            (_rx(r"periodic|element"), "Periodic Table"),
            (_rx(r"acid|base|ph"), "Acid-Base Chemistry"),
            (_rx(r"organic|carbon|hydrocarbon"), "Organic Chemistry"),
            (_rx(r"bond|molecule|structure"), "Chemical Bonding"),
            (_rx(r"reaction|equation|balance"), "Chemical Reactions"),
        ),
    ),
    (
        _rx(r"biology|cell|gene|dna|evolution|ecosystem|organism|plant|animal|human"),
        "Biology",
        (
            (_rx(r"cell|organelle|membrane"), "Cell Biology"),
            (_rx(r"gene|dna|rna|genetic|heredity"), "Genetics"),
            (_rx(r"evolution|natural selection|adaptation"), "Evolution"),
            (_rx(r"ecosystem|ecology|environment"), "Ecology"),
            (_rx(r"human|anatomy|physiology|organ"), "Human Biology"),
        ),
    ),
    (
        _rx(r"math|algebra|geometry|calculus|trigonometry|equation|function|number"),
        "Mathematics",
        (
            (_rx(r"algebra|equation|variable|expression"), "Algebra"),
            (_rx(r"geometry|shape|angle|triangle|circle"), "Geometry"),
            (_rx(r"calculus|derivative|integral|limit"), "Calculus"),
            (_rx(r"trigonometry|sin|cos|tan|angle"), "Trigonometry"),
            (_rx(r"statistic|probability|distribution"), "Statistics & Probability"),
        ),
    ),
)


def _first_topic(text: str, rules: Tuple[TopicRule, ...]) -> str:
    for pattern, topic in rules:
        if pattern.search(text):
            return topic
    return DEFAULT_TOPIC


def detect_subject_and_topic(text: str) -> SubjectTopic:
    """Map free text to a (subject, topic) pair.

    Args:
        text: Any message text.

    Returns:
        SubjectTopic for the first matching subject rule, or
        General Knowledge / Conceptual Understanding when nothing matches.
    """
    for pattern, subject, topic_rules in SUBJECT_RULES:
        if pattern.search(text):
            return SubjectTopic(subject=subject, topic=_first_topic(text, topic_rules))
    return SubjectTopic()


# ---------------------------------------------------------------------------
# Explicit "Subject: X | Topic: Y" requests
# ---------------------------------------------------------------------------

_SUBJECT_TOPIC_HEADER = re.compile(r"subject\s*:\s*([^|]+)\s*\|\s*topic\s*:\s*([^\n]+)", re.IGNORECASE)
_QUESTION_LINE = re.compile(r"question\s*:\s*([^\n]+)", re.IGNORECASE)
_TEMPLATE_REQUEST = re.compile(r"template|format", re.IGNORECASE)
_LEADING_FILLER = (
    re.compile(r"^in\s+", re.IGNORECASE),
    re.compile(r"^about\s+", re.IGNORECASE),
    re.compile(r"^regarding\s+", re.IGNORECASE),
)


def _clean_label(label: str, default: str) -> str:
    """Tidy a user-written header label: drop leading filler, title-case words."""
    for filler in _LEADING_FILLER:
        label = filler.sub("", label)
    cleaned = " ".join(word[:1].upper() + word[1:].lower() for word in label.split(" "))
    return cleaned if cleaned.strip() else default


def parse_educational_query(message: str) -> EducationalQuery:
    """Collect subject, topic and question for a message that gets the template.

    A ``Subject: X | Topic: Y`` header or a ``Question: ...`` line written by
    the user takes precedence over detection and marks the template as
    explicitly requested, as does the word "template" or "format".
    """
    forced = False

    header = _SUBJECT_TOPIC_HEADER.search(message)
    if header:
        subject = _clean_label(header.group(1).strip(), DEFAULT_SUBJECT)
        topic = _clean_label(header.group(2).strip(), DEFAULT_TOPIC)
        forced = True
    else:
        detected = detect_subject_and_topic(message)
        subject, topic = detected.subject, detected.topic

    question_line = _QUESTION_LINE.search(message)
    if question_line:
        question = question_line.group(1).strip()
        forced = True
    else:
        question = extract_question(message)

    if _TEMPLATE_REQUEST.search(message):
        forced = True

    return EducationalQuery(
        subject=subject,
        topic=topic,
        question=question,
        forced_template=forced,
    )
