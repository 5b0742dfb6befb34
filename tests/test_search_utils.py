"""Tests for query validation and presentation helpers."""

import math

import pytest

from portfolio_search.errors import QueryValidationError
from portfolio_search.models.content import SearchableRecord
from portfolio_search.search_utils import (
    calculate_search_metrics,
    format_result_description,
    format_search_query,
    group_results_by_type,
    should_perform_search,
    type_label,
    validate_search_query,
)


class TestValidateSearchQuery:
    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty(self, query):
        result = validate_search_query(query)
        assert not result.is_valid
        assert result.error == "Search query cannot be empty"

    def test_too_short(self):
        result = validate_search_query("a")
        assert not result.is_valid
        assert "at least 2" in result.error
        assert result.suggestions

    def test_too_long(self):
        assert not validate_search_query("a" * 101).is_valid
        assert validate_search_query("a" * 100).is_valid

    def test_special_characters(self):
        assert not validate_search_query("!!!??a").is_valid
        assert validate_search_query("c++ dev").is_valid

    def test_raise_for_error(self):
        with pytest.raises(QueryValidationError) as exc_info:
            validate_search_query("a").raise_for_error()
        assert exc_info.value.suggestions == ["Try a longer search term"]

        validate_search_query("payment").raise_for_error()


def test_format_search_query():
    assert format_search_query("  Payment   SYSTEMS!? ") == "payment systems"
    assert format_search_query("event-driven") == "event-driven"


class TestShouldPerformSearch:
    def test_first_search(self):
        assert should_perform_search("payment", "", None, now=10.0)

    def test_too_short(self):
        assert not should_perform_search("p", "", None, now=10.0)

    def test_same_as_last(self):
        assert not should_perform_search("payment", "payment", 1.0, now=10.0)

    def test_too_soon(self):
        assert not should_perform_search("payments", "payment", 9.9, now=10.0)
        assert should_perform_search("payments", "payment", 9.5, now=10.0)


def test_type_label():
    assert type_label("writing") == "Article"
    assert type_label("project") == "Project"
    assert type_label("podcast") == "podcast"


class TestFormatResultDescription:
    def test_short_text_unchanged(self):
        assert format_result_description("Short.") == "Short."

    def test_cuts_at_sentence_end(self):
        text = "A" * 120 + ". " + "B" * 100
        assert format_result_description(text) == "A" * 120 + "."

    def test_cuts_at_word_boundary(self):
        text = "word " * 60
        result = format_result_description(text)
        assert result.endswith("...")
        assert len(result) <= 153

    def test_hard_cut(self):
        assert format_result_description("x" * 200) == "x" * 150 + "..."


def test_group_results_by_type():
    records = [
        SearchableRecord(id="a", title="A", type="project"),
        SearchableRecord(id="b", title="B", type="writing"),
        SearchableRecord(id="c", title="C", type="project"),
    ]
    groups = group_results_by_type(records)

    assert list(groups) == ["project", "writing"]
    assert [r.id for r in groups["project"]] == ["a", "c"]


def test_calculate_search_metrics():
    metrics = calculate_search_metrics(1.0, 1.5, result_count=10, query_length=7)

    assert metrics["search_time_ms"] == pytest.approx(500.0)
    assert metrics["results_per_second"] == pytest.approx(20.0)
    assert metrics["query_complexity"] == pytest.approx(math.log(8))
