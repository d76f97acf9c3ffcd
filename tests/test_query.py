"""
Tests for term search and translation statistics.

Run with: pytest tests/test_query.py -v
"""

from unity_translator.project_model import ExtractedTerm
from unity_translator.query import (
    count_translated, filter_terms, is_translated, translation_stats,
)

TERMS = [
    ExtractedTerm("Greeting", "Hello there", 0, 2),
    ExtractedTerm("Menu/Quit", "Leave the game", 3, 5),
    ExtractedTerm("Menu/Options", "", 6, None),
]


class TestFilterTerms:
    """Tests for case-insensitive search."""

    def test_empty_query_returns_same_list(self):
        assert filter_terms(TERMS, "") is TERMS

    def test_matches_term_case_insensitively(self):
        assert filter_terms(TERMS, "GREET") == [TERMS[0]]

    def test_matches_original_text(self):
        assert filter_terms(TERMS, "the game") == [TERMS[1]]

    def test_matches_keep_order(self):
        assert filter_terms(TERMS, "menu") == [TERMS[1], TERMS[2]]

    def test_no_match(self):
        assert filter_terms(TERMS, "zzz") == []


class TestTranslationCounts:
    """Tests for translated-count aggregation."""

    def test_blank_translation_not_counted(self):
        translations = {"Greeting": "Bonjour", "Menu/Quit": "   "}
        assert count_translated(TERMS, translations) == 1

    def test_missing_translation_not_counted(self):
        assert count_translated(TERMS, {}) == 0
        assert not is_translated("Greeting", {})

    def test_translation_without_data_line_counted(self):
        """Counting is by key; writability is reported separately."""
        translations = {"Menu/Options": "Options"}
        assert count_translated(TERMS, translations) == 1

    def test_stats(self):
        stats = translation_stats(TERMS, {"Greeting": "Bonjour", "Unused": "x"})

        assert stats.total == 3
        assert stats.translated == 1
        assert stats.untranslated == 2
        assert stats.with_data_line == 2
        assert stats.percent == 33

    def test_stats_empty(self):
        stats = translation_stats([], {})
        assert stats.total == 0
        assert stats.percent == 0
