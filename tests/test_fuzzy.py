"""Tests for the approximate matcher."""

from portfolio_search.retrieval.fuzzy import (
    APPROXIMATE_SCORE,
    EXACT_SCORE,
    PREFIX_SCORE,
    SUBSTRING_SCORE,
    MAX_APPROXIMATE_LENGTH,
    WORD_START_SCORE,
    FuzzyMatcher,
    approximate_find,
    fold,
    merge_spans,
)


class TestFuzzyMatcher:
    """Tests for FuzzyMatcher."""

    def setup_method(self):
        self.matcher = FuzzyMatcher(threshold=0.3)

    def test_exact_match_is_case_insensitive(self):
        result = self.matcher.match("python", "Python")
        assert result.score == EXACT_SCORE
        assert result.spans == [(0, 6)]

    def test_prefix_beats_word_start_beats_substring(self):
        prefix = self.matcher.match("pay", "Payment systems")
        word_start = self.matcher.match("pay", "Scalable Payment")
        substring = self.matcher.match("pay", "Prepayment")

        assert prefix.score == PREFIX_SCORE
        assert word_start.score == WORD_START_SCORE
        assert substring.score == SUBSTRING_SCORE

    def test_every_occurrence_is_a_span(self):
        result = self.matcher.match("ab", "ab cab")
        assert result.spans == [(0, 2), (4, 6)]

    def test_typo_matches_approximately(self):
        result = self.matcher.match("paymnt", "Building Scalable Payment Systems")
        assert result.matched
        assert result.score < APPROXIMATE_SCORE
        start, end = result.spans[0]
        assert "Building Scalable Payment Systems"[start:end].lower().startswith("paym")

    def test_unrelated_text_does_not_match(self):
        assert not self.matcher.match("kubernetes", "Component Design System").matched

    def test_short_pattern_never_matches(self):
        assert not self.matcher.match("a", "a cat").matched

    def test_missing_text(self):
        assert not self.matcher.match("python", None).matched
        assert not self.matcher.match("python", "").matched

    def test_multi_word_falls_back_to_tokens(self):
        result = self.matcher.match("payment kubernetes", "Kubernetes and payments")
        assert result.matched
        assert result.score < PREFIX_SCORE
        assert len(result.spans) == 2

    def test_internal_whitespace_is_collapsed_on_both_sides(self):
        result = self.matcher.match("Foo  Bar", "Foo  Bar")
        assert result.score == EXACT_SCORE
        assert result.spans == [(0, 8)]

        assert self.matcher.match("foo bar", "Foo\tBar").score == EXACT_SCORE

    def test_spans_point_into_original_text_after_case_folding(self):
        text = "İstanbul Payment Hub"
        result = self.matcher.match("payment", text)

        assert result.score == WORD_START_SCORE
        assert [text[s:e] for s, e in result.spans] == ["Payment"]

    def test_long_phrase_skips_approximate_pass(self):
        phrase = "paymnt " * 6
        assert len(phrase.strip()) > MAX_APPROXIMATE_LENGTH
        result = self.matcher.match(phrase, "Payment")
        assert result.matched
        assert result.spans == [(0, 7)]

    def test_best_of_picks_highest(self):
        best, matches = self.matcher.best_of("back", ["frontend", "backend"])
        assert best.score == PREFIX_SCORE
        assert [m.matched for m in matches] == [False, True]


class TestApproximateFind:
    def test_exact_substring_has_no_errors(self):
        assert approximate_find("pay", "prepay", 1) == (0, 3, 6)

    def test_insertion(self):
        errors, start, end = approximate_find("paymnt", "payment", 1)
        assert errors == 1
        assert (start, end) == (0, 7)

    def test_budget_exceeded(self):
        assert approximate_find("kubernetes", "react", 3) is None

    def test_substitution_inside_long_text(self):
        text = "notes on " * 40 + "kubernetis operators"
        errors, start, end = approximate_find("kubernetes", text, 3)

        assert errors == 1
        assert text[start:end] == "kubernetis"

    def test_leftmost_of_equal_alignments(self):
        assert approximate_find("abcd", "abxd abyd", 1) == (1, 0, 4)


def test_merge_spans():
    assert merge_spans([(5, 7), (0, 2), (1, 3), (7, 9)]) == [(0, 3), (5, 9)]


class TestFold:
    def test_plain_ascii_keeps_offsets(self):
        folded = fold("Payment Systems")
        assert folded.text == "payment systems"
        assert folded.to_original(0, 7) == (0, 7)

    def test_whitespace_runs_map_back(self):
        folded = fold("Foo \t Bar")
        assert folded.text == "foo bar"
        assert folded.to_original(4, 7) == (6, 9)
        assert folded.to_original(0, 7) == (0, 9)

    def test_expanding_lowercase_maps_back(self):
        folded = fold("İx")
        assert len(folded.text) == 3
        assert folded.to_original(2, 3) == (1, 2)
