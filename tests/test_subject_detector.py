"""Tests for subject/topic detection and explicit template requests."""

import pytest

from study_assistant.models.classification import DEFAULT_SUBJECT, DEFAULT_TOPIC
from study_assistant.services.subject_detector import (
    SUBJECT_RULES,
    detect_subject_and_topic,
    parse_educational_query,
)


class TestDetectSubjectAndTopic:

    @pytest.mark.parametrize("text,subject,topic", [
        ("Explain the motion of a projectile", "Physics", "Kinematics"),
        ("How does gravity affect tides?", "Physics", "Gravitation"),
        ("Tell me about waves", "Physics", DEFAULT_TOPIC),
        ("Balance this chemical reaction", "Chemistry", "Chemical Reactions"),
        ("What is an acid?", "Chemistry", "Acid-Base Chemistry"),
        ("Describe the structure of a plant cell", "Biology", "Cell Biology"),
        ("Explain DNA replication", "Biology", "Genetics"),
        ("Solve the quadratic equation x^2 - 4 = 0", "Mathematics", "Algebra"),
        ("In calculus, find the derivative of sin x", "Mathematics", "Calculus"),
    ])
    def test_subject_and_topic(self, text, subject, topic):
        result = detect_subject_and_topic(text)
        assert result.subject == subject
        assert result.topic == topic

    def test_force_is_checked_before_gravity(self):
        """Newton's Laws precedes Gravitation, so "force" wins over "gravity"."""
        result = detect_subject_and_topic("What is the force of gravity acting on a falling object?")
        assert result.subject == "Physics"
        assert result.topic == "Newton's Laws"

    def test_physics_wins_over_chemistry(self):
        # "energy" and "bond" both appear; Physics is checked first
        result = detect_subject_and_topic("bond energy")
        assert result.subject == "Physics"
        assert result.topic == "Work and Energy"

    def test_no_match_returns_defaults(self):
        result = detect_subject_and_topic("Who painted the Mona Lisa?")
        assert result.subject == DEFAULT_SUBJECT
        assert result.topic == DEFAULT_TOPIC

    def test_empty_text_returns_defaults(self):
        result = detect_subject_and_topic("")
        assert (result.subject, result.topic) == (DEFAULT_SUBJECT, DEFAULT_TOPIC)

    def test_matching_is_case_insensitive(self):
        assert detect_subject_and_topic("NEWTON'S FORCE").topic == "Newton's Laws"

    def test_rule_order(self):
        assert [subject for _, subject, _ in SUBJECT_RULES] == [
            "Physics", "Chemistry", "Biology", "Mathematics",
        ]

    def test_repeated_calls_agree(self):
        text = "Explain the motion of a projectile"
        assert detect_subject_and_topic(text) == detect_subject_and_topic(text)


class TestParseEducationalQuery:

    def test_explicit_header_and_question(self):
        query = parse_educational_query(
            "Subject: physics | Topic: in kinematics\nQuestion: What is velocity?"
        )
        assert query.subject == "Physics"
        assert query.topic == "Kinematics"
        assert query.question == "What is velocity?"
        assert query.forced_template is True

    def test_header_labels_are_title_cased(self):
        query = parse_educational_query("Subject: organic CHEMISTRY | Topic: about alkenes")
        assert query.subject == "Organic Chemistry"
        assert query.topic == "Alkenes"

    def test_detected_labels_keep_their_casing(self):
        query = parse_educational_query("What is an acid-base reaction?")
        assert query.subject == "Chemistry"
        assert query.topic == "Acid-Base Chemistry"

    def test_detected_subject_without_header(self):
        query = parse_educational_query("Explain the motion of a projectile")
        assert query.subject == "Physics"
        assert query.topic == "Kinematics"
        assert query.question == "the motion of a projectile"
        assert query.forced_template is False

    def test_template_word_forces_template(self):
        query = parse_educational_query("Use the template: why is the sky blue?")
        assert query.forced_template is True
        assert query.question == "Use the template: why is the sky blue?"

    def test_unmatched_message_uses_defaults(self):
        query = parse_educational_query("Who painted the Mona Lisa?")
        assert query.subject == DEFAULT_SUBJECT
        assert query.topic == DEFAULT_TOPIC
        assert query.question == "Who painted the Mona Lisa?"
