"""Autocomplete suggestions derived from the indexed records."""

from typing import Sequence

from portfolio_search.models.content import SearchableRecord


class SuggestionEngine:
    """
    Suggests titles, tags and technology names for a partial query.

    Titles must start with the query; tags and technology names need only
    contain it. Results keep that order, deduplicated, capped at ``limit``.
    """

    def __init__(self, limit: int = 10, min_length: int = 2):
        self.limit = limit
        self.min_length = min_length

    def suggest(self, query: str, records: Sequence[SearchableRecord]) -> list[str]:
        needle = query.strip().lower()
        if len(needle) < self.min_length:
            return []

        # dict preserves insertion order, so it doubles as an ordered set
        suggestions: dict[str, None] = {}

        for record in records:
            if record.title.lower().startswith(needle):
                suggestions.setdefault(record.title)

        for record in records:
            for tag in record.tags:
                if needle in tag.lower():
                    suggestions.setdefault(tag)

        for record in records:
            for tech in record.technologies:
                if needle in tech.name.lower():
                    suggestions.setdefault(tech.name)

        return list(suggestions)[: self.limit]
