"""Portfolio content search: aggregation, caching, fuzzy index and query pipeline."""

__version__ = "0.1.0"
