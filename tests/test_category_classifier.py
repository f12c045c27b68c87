"""Tests for concept card category voting."""

import pytest

from study_assistant.services.category_classifier import (
    CARD_LABELS,
    CATEGORY_KEYWORDS,
    determine_category,
    pick_top_category,
    score_categories,
)


def test_table_order_starts_with_card_sciences():
    assert list(CATEGORY_KEYWORDS)[:3] == ["Physics", "Chemistry", "Biology"]


def test_card_labels():
    assert CARD_LABELS == ("Physics", "Chemistry", "Biology", "Other")


class TestScoreCategories:

    def test_presence_not_frequency(self):
        assert score_categories("force force force")["Physics"] == 1

    def test_case_insensitive_text(self):
        assert score_categories("PHOTOSYNTHESIS")["Biology"] == 1

    def test_every_category_is_scored(self):
        assert set(score_categories("")) == set(CATEGORY_KEYWORDS)


class TestPickTopCategory:

    def test_strictly_higher_count_wins(self):
        assert pick_top_category({"Physics": 1, "Chemistry": 2}) == "Chemistry"

    def test_tie_keeps_first_in_order(self):
        assert pick_top_category({"Physics": 2, "Chemistry": 2, "Biology": 1}) == "Physics"

    def test_all_zero_is_other(self):
        assert pick_top_category({"Physics": 0, "Chemistry": 0}) == "Other"


class TestDetermineCategory:

    @pytest.mark.parametrize("title,query,content,expected", [
        ("Momentum", "what is momentum and velocity", "", "Physics"),
        ("Covalent bond", "molecule", "", "Chemistry"),
        ("Photosynthesis", "plant cell", "", "Biology"),
    ])
    def test_science_categories(self, title, query, content, expected):
        assert determine_category(title, query, content) == expected

    def test_tie_resolves_to_first_enumerated(self):
        # One Physics keyword and one Chemistry keyword
        assert determine_category("force", "reaction", "") == "Physics"
        assert determine_category("reaction", "force", "") == "Physics"

    def test_mathematics_maps_to_physics_by_default(self):
        assert determine_category("algebra", "equation", "") == "Physics"

    def test_umbrella_winner_uses_specific_science_with_two_hits(self):
        assert determine_category("cell dna", "experiment research laboratory", "") == "Biology"

    def test_non_science_winner_maps_to_other(self):
        assert determine_category("war", "revolution empire", "") == "Other"

    def test_no_keywords_is_other(self):
        assert determine_category("", "", "") == "Other"

    @pytest.mark.parametrize("text", ["", "🙂", "x" * 5000, "Les équations différentielles"])
    def test_always_a_card_label(self, text):
        assert determine_category(text, text, text) in CARD_LABELS

    def test_repeated_calls_agree(self):
        args = ("Entropy", "What is entropy in thermodynamics?", "Entropy measures disorder.")
        assert determine_category(*args) == determine_category(*args)
