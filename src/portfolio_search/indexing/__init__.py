"""Indexing package."""

from portfolio_search.indexing.manager import IndexManager

__all__ = ["IndexManager"]
