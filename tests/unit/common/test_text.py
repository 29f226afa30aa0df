"""Tests for common.text module."""

from datetime import datetime, timedelta, timezone

import pytest

from common.text import (
    article_similarity,
    containment,
    extract_keywords,
    extract_locations,
    extract_numbers,
    extract_quotes,
    jaccard,
    normalize_title,
    strip_title_decorations,
    temporal_boost,
    title_similarity,
)


class TestStripTitleDecorations:
    def test_publisher_prefix_and_suffix(self) -> None:
        assert strip_title_decorations("BBC: Storm hits coast - Reuters") == "Storm hits coast"

    def test_editorial_prefix(self) -> None:
        assert strip_title_decorations("BREAKING: Storm hits coast") == "Storm hits coast"

    def test_bracket_prefix(self) -> None:
        assert strip_title_decorations("[Video] Storm hits coast") == "Storm hits coast"

    def test_trailing_iso_date(self) -> None:
        assert strip_title_decorations("Storm hits coast (2024-01-01)") == "Storm hits coast"


class TestNormalizeTitle:
    def test_lowercases_and_drops_stop_words(self) -> None:
        assert normalize_title("The Storm Hits the Coast!") == "storm hits coast"

    def test_empty(self) -> None:
        assert normalize_title("") == ""


class TestJaccard:
    def test_partial_overlap(self) -> None:
        assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)

    def test_both_empty(self) -> None:
        assert jaccard([], []) == 0.0


class TestTitleSimilarity:
    def test_same_after_normalization(self) -> None:
        assert title_similarity("BBC: Storm hits coast", "Storm hits the coast") == 1.0

    def test_empty_title_scores_zero(self) -> None:
        assert title_similarity("", "Storm hits coast") == 0.0

    def test_unrelated_titles_score_low(self) -> None:
        assert title_similarity("Storm hits coast", "Parliament passes budget") < 0.3

    def test_in_unit_range(self) -> None:
        score = title_similarity("Storm hits coast overnight", "Storm hits coast")
        assert 0.0 <= score <= 1.0


class TestContainment:
    def test_shorter_title_fully_contained(self) -> None:
        assert containment("Storm hits coast", "Huge storm hits coast overnight") == 1.0

    def test_no_significant_words(self) -> None:
        assert containment("a of", "Storm hits coast") == 0.0


class TestExtractors:
    def test_quotes(self) -> None:
        assert extract_quotes('He said "we will rebuild the city" today') == {"we will rebuild the city"}

    def test_short_quotes_ignored(self) -> None:
        assert extract_quotes('He said "no" today') == set()

    def test_locations(self) -> None:
        assert "paris" in extract_locations("Protests erupt in Paris overnight")

    def test_numbers(self) -> None:
        assert "12 people" in extract_numbers("At least 12 people were hurt")

    def test_keywords(self) -> None:
        keywords = extract_keywords("Joe Biden met Emmanuel Macron")
        assert keywords == {"joe biden", "emmanuel macron"}


class TestTemporalBoost:
    @pytest.mark.parametrize(
        "hours, expected",
        [(1, 1.15), (3, 1.08), (12, 1.0), (48, 0.95)],
    )
    def test_bands(self, hours: int, expected: float) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert temporal_boost(now, now - timedelta(hours=hours)) == expected


class TestArticleSimilarity:
    def test_matching_titles(self) -> None:
        assert article_similarity("Storm hits coast", "", "BBC: Storm hits coast", "") == 1.0

    def test_shared_quote(self) -> None:
        score = article_similarity(
            "Minister speaks out",
            'She said "the recovery will take many years" on Monday',
            "Rebuilding effort begins",
            'Officials warned "the recovery will take many years" in a statement',
        )
        assert score >= 0.75

    def test_unrelated_articles(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        score = article_similarity(
            "Stock markets rally on rate cut hopes",
            "investors cheered the news",
            "Local team wins championship final",
            "fans celebrated late into the night",
            now,
            now,
        )
        assert score < 0.3

    def test_never_exceeds_one(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        score = article_similarity("A b c", "x", "A b d", "x", now, now)
        assert 0.0 <= score <= 1.0
