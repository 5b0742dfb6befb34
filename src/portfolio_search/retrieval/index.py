"""Weighted multi-field fuzzy index over searchable records."""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from portfolio_search.models.content import SearchableRecord
from portfolio_search.models.search import Highlights, SearchOptions, SearchResult
from portfolio_search.retrieval.fuzzy import EXACT_SCORE, FieldMatch, FuzzyMatcher
from portfolio_search.retrieval.highlight import HighlightFormatter

DEFAULT_WEIGHTS = {
    "title": 0.4,
    "description": 0.3,
    "tags": 0.2,
    "other": 0.1,  # technologies, category, client, role
}


@dataclass
class _Scored:
    """A record with its per-field matches, before highlights are rendered."""

    record: SearchableRecord
    relevance: float
    title: FieldMatch
    description: FieldMatch
    tags: list[FieldMatch]
    technologies: list[FieldMatch]


class SearchIndex:
    """
    Immutable snapshot of the aggregated records.

    Queries are pure functions of the snapshot. A refresh builds a new
    SearchIndex instead of mutating this one.
    """

    def __init__(
        self,
        records: Sequence[SearchableRecord],
        matcher: FuzzyMatcher | None = None,
        highlighter: HighlightFormatter | None = None,
        weights: dict[str, float] | None = None,
        version: str | None = None,
    ):
        self._records: tuple[SearchableRecord, ...] = tuple(records)
        self.matcher = matcher or FuzzyMatcher()
        self.highlighter = highlighter or HighlightFormatter()
        self.weights = {**DEFAULT_WEIGHTS, **(weights or {})}
        self.built_at = datetime.now()
        self.version = version or self.built_at.strftime("v%Y%m%d_%H%M%S")

    @property
    def records(self) -> tuple[SearchableRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def count_by_type(self) -> dict[str, int]:
        """Return the number of records per record type."""
        counts: dict[str, int] = {}
        for record in self._records:
            counts[record.type] = counts.get(record.type, 0) + 1
        return counts

    def query(self, query: str, options: SearchOptions | None = None) -> list[SearchResult]:
        """
        Search the snapshot.

        Args:
            query: Free-text query; blank queries return no results
            options: Limit and exact type/category pre-filters

        Returns:
            Results sorted by relevance descending, then title ascending
        """
        options = options or SearchOptions()
        needle = query.strip()
        if not needle:
            return []

        candidates = self._records
        if options.type:
            candidates = tuple(r for r in candidates if r.type == options.type)
        if options.category:
            candidates = tuple(r for r in candidates if r.category == options.category)

        scored = [s for s in (self._score(needle, r) for r in candidates) if s is not None]
        scored.sort(key=lambda s: (-s.relevance, s.record.title.casefold(), s.record.title, s.record.id))

        return [self._to_result(s) for s in scored[: options.limit]]

    def _score(self, needle: str, record: SearchableRecord) -> _Scored | None:
        match = self.matcher.match
        title = match(needle, record.title)
        description = match(needle, record.description)
        tags_best, tags = self.matcher.best_of(needle, record.tags)
        tech_best, technologies = self.matcher.best_of(
            needle, [t.name for t in record.technologies]
        )
        other = max(
            tech_best.score,
            match(needle, record.category).score,
            match(needle, record.metadata.client).score,
            match(needle, record.metadata.role).score,
        )

        if not (title.matched or description.matched or tags_best.matched or other > 0):
            return None

        if title.score == EXACT_SCORE:
            relevance = 1.0
        else:
            relevance = (
                title.score * self.weights["title"]
                + description.score * self.weights["description"]
                + tags_best.score * self.weights["tags"]
                + other * self.weights["other"]
            )
            relevance = min(max(relevance, 0.0), 1.0)

        return _Scored(
            record=record,
            relevance=relevance,
            title=title,
            description=description,
            tags=tags,
            technologies=technologies,
        )

    def _to_result(self, scored: _Scored) -> SearchResult:
        record = scored.record
        segments = self.highlighter.segments
        highlights = Highlights(
            title=segments(record.title, scored.title.spans),
            description=segments(record.description, scored.description.spans),
            tags=[segments(tag, m.spans) for tag, m in zip(record.tags, scored.tags)],
            technologies=[
                segments(tech.name, m.spans)
                for tech, m in zip(record.technologies, scored.technologies)
            ],
        )
        return SearchResult(**dict(record), relevance=scored.relevance, highlights=highlights)
