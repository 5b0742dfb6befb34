"""Retrieval package."""

from portfolio_search.retrieval.cache import CacheEntry, CacheManager
from portfolio_search.retrieval.fuzzy import FieldMatch, FuzzyMatcher
from portfolio_search.retrieval.highlight import HighlightFormatter
from portfolio_search.retrieval.index import SearchIndex
from portfolio_search.retrieval.suggest import SuggestionEngine

__all__ = [
    "CacheEntry",
    "CacheManager",
    "FieldMatch",
    "FuzzyMatcher",
    "HighlightFormatter",
    "SearchIndex",
    "SuggestionEngine",
]
