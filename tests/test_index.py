"""Tests for the weighted fuzzy search index."""

import time

from portfolio_search.models.content import RECORD_TYPES, SearchableRecord
from portfolio_search.models.search import SearchOptions
from portfolio_search.retrieval.index import SearchIndex


class TestSearchIndex:
    """Tests for SearchIndex.query."""

    def test_blank_query_returns_nothing(self, records):
        index = SearchIndex(records)
        assert index.query("") == []
        assert index.query("   ") == []

    def test_payment_finds_case_study_with_title_highlight(self, records):
        index = SearchIndex(records)
        results = index.query("payment")

        match = next(r for r in results if r.title == "Building Scalable Payment Systems")
        assert match.relevance > 0
        marked = [s.text for s in match.highlights.title if s.matched]
        assert marked == ["Payment"]

    def test_exact_title_ranks_first_with_max_relevance(self, records):
        index = SearchIndex(records)
        results = index.query("microservices patterns")

        assert results[0].title == "Microservices Patterns"
        assert results[0].relevance == 1.0
        assert all(r.relevance < 1.0 for r in results[1:])

    def test_limit(self, records):
        index = SearchIndex(records)
        assert len(index.query("payment")) > 1
        assert len(index.query("payment", SearchOptions(limit=1))) == 1

    def test_type_filter_applies_before_ranking(self, records):
        index = SearchIndex(records)
        results = index.query("payment", SearchOptions(type="project"))

        assert results
        assert all(r.type == "project" for r in results)

    def test_category_filter(self, records):
        index = SearchIndex(records)
        results = index.query("engineer", SearchOptions(category="fintech"))

        assert results
        assert all(r.category == "fintech" for r in results)

    def test_records_without_any_match_are_excluded(self, records):
        index = SearchIndex(records)
        assert index.query("zxqvw") == []

    def test_results_are_deterministic(self, records):
        index = SearchIndex(records)
        first = [(r.id, r.relevance) for r in index.query("engineering")]
        second = [(r.id, r.relevance) for r in index.query("engineering")]
        assert first == second

    def test_ties_are_broken_by_title(self):
        records = [
            SearchableRecord(id="z", title="Zeta", description="shared words", type="skill"),
            SearchableRecord(id="a", title="Alpha", description="shared words", type="skill"),
        ]
        results = SearchIndex(records).query("shared")

        assert [r.title for r in results] == ["Alpha", "Zeta"]
        assert results[0].relevance == results[1].relevance

    def test_highlights_preserve_field_text(self, records):
        index = SearchIndex(records)
        for result in index.query("payment"):
            assert "".join(s.text for s in result.highlights.title) == result.title
            assert "".join(s.text for s in result.highlights.description) == result.description
            assert len(result.highlights.tags) == len(result.tags)

    def test_technology_match_counts(self, records):
        index = SearchIndex(records)
        results = index.query("kubernetes")

        project = next(r for r in results if r.id == "payment-platform")
        tech_marks = [s for segments in project.highlights.technologies for s in segments if s.matched]
        assert [s.text for s in tech_marks] == ["Kubernetes"]

    def test_count_by_type_and_version(self, records):
        index = SearchIndex(records)

        assert len(index) == 8
        assert index.count_by_type() == {
            "project": 2,
            "writing": 3,
            "experience": 1,
            "skill": 1,
            "profile": 1,
        }
        assert set(index.count_by_type()) == set(RECORD_TYPES)
        assert index.version.startswith("v")

    def test_exact_title_with_internal_double_space_ranks_first(self):
        records = [
            SearchableRecord(id="baz", title="Foo Bar baz", type="project"),
            SearchableRecord(id="exact", title="Foo  Bar", type="project"),
        ]
        results = SearchIndex(records).query("Foo  Bar")

        assert [r.id for r in results] == ["exact", "baz"]
        assert results[0].relevance == 1.0
        assert [s.text for s in results[0].highlights.title if s.matched] == ["Foo  Bar"]

    def test_highlight_after_expanding_lowercase(self):
        records = [SearchableRecord(id="hub", title="İstanbul Payment Hub", type="project")]
        result = SearchIndex(records).query("payment")[0]

        assert [(s.text, s.matched) for s in result.highlights.title] == [
            ("İstanbul ", False),
            ("Payment", True),
            (" Hub", False),
        ]

    def test_long_unmatched_query_over_large_corpus_is_fast(self):
        sentence = "cloud platform services for distributed data pipelines and reporting. "
        description = (sentence * 8)[:500]
        records = [
            SearchableRecord(
                id=f"record-{i}",
                title=f"Platform Migration {i}",
                description=description,
                type="project",
                tags=["cloud", "data"],
            )
            for i in range(200)
        ]
        index = SearchIndex(records)
        query = "zephyr quixote jukebox fjord vex whisky glyph nymph crypt lynx"
        assert len(query) > 60

        start = time.perf_counter()
        index.query(query)
        elapsed = time.perf_counter() - start

        assert elapsed < 1.0
