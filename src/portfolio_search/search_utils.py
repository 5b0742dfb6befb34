"""Query validation and result presentation helpers."""

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, TypeVar

from portfolio_search.config import get_settings
from portfolio_search.errors import QueryValidationError

T = TypeVar("T")

TYPE_LABELS = {
    "project": "Project",
    "writing": "Article",
    "experience": "Experience",
    "skill": "Skill",
    "profile": "Profile",
}

_SPECIAL_CHAR = re.compile(r"[^\w\s]")


@dataclass
class QueryValidation:
    """Outcome of validating a query."""

    is_valid: bool
    error: str | None = None
    suggestions: list[str] = field(default_factory=list)

    def raise_for_error(self):
        if not self.is_valid:
            raise QueryValidationError(self.error or "Invalid search query", self.suggestions)


def validate_search_query(
    query: str,
    min_length: int | None = None,
    max_length: int | None = None,
    max_special_ratio: float | None = None,
) -> QueryValidation:
    """Check a query for emptiness, length and excessive special characters."""
    settings = get_settings()
    min_length = min_length if min_length is not None else settings.min_query_length
    max_length = max_length if max_length is not None else settings.max_query_length
    max_special_ratio = (
        max_special_ratio if max_special_ratio is not None else settings.max_special_char_ratio
    )

    trimmed = query.strip()
    if not trimmed:
        return QueryValidation(False, "Search query cannot be empty")

    if len(trimmed) < min_length:
        return QueryValidation(
            False,
            f"Search query must be at least {min_length} characters long",
            ["Try a longer search term"],
        )

    if len(trimmed) > max_length:
        return QueryValidation(
            False,
            "Search query is too long",
            ["Try a shorter, more specific search term"],
        )

    special_ratio = len(_SPECIAL_CHAR.findall(trimmed)) / len(trimmed)
    if special_ratio > max_special_ratio:
        return QueryValidation(
            False,
            "Search query contains too many special characters",
            ["Try using mostly letters and numbers"],
        )

    return QueryValidation(True)


def format_search_query(query: str) -> str:
    """Lowercase, collapse whitespace and strip symbols other than hyphens."""
    query = re.sub(r"\s+", " ", query.strip().lower())
    return re.sub(r"[^\w\s-]", "", query)


def should_perform_search(
    query: str,
    last_query: str,
    last_search_time: float | None,
    now: float,
    min_query_length: int = 2,
    min_interval: float = 0.3,
) -> bool:
    """
    Decide whether a debounced query is worth running.

    Times are in seconds; ``last_search_time`` is None before the first search.
    """
    if len(query) < min_query_length:
        return False
    if last_search_time is not None and now - last_search_time < min_interval:
        return False
    if query == last_query:
        return False
    return True


def type_label(record_type: str) -> str:
    return TYPE_LABELS.get(record_type, record_type)


def format_result_description(description: str, max_length: int = 150) -> str:
    """Truncate a description at a sentence or word boundary when possible."""
    if len(description) <= max_length:
        return description

    truncated = description[:max_length]
    last_period = truncated.rfind(".")
    last_space = truncated.rfind(" ")

    if last_period > max_length * 0.7:
        return truncated[: last_period + 1]
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def group_results_by_type(results: Iterable[T]) -> dict[str, list[T]]:
    """Group results by their ``type`` attribute, keeping result order."""
    groups: dict[str, list[T]] = {}
    for result in results:
        groups.setdefault(result.type, []).append(result)
    return groups


def calculate_search_metrics(
    start_time: float, end_time: float, result_count: int, query_length: int
) -> dict:
    """Compute timing metrics for one search; times in seconds, output in ms."""
    search_time_ms = (end_time - start_time) * 1000
    results_per_second = result_count / (search_time_ms / 1000) if search_time_ms > 0 else 0.0
    return {
        "search_time_ms": search_time_ms,
        "results_per_second": results_per_second,
        "query_complexity": math.log(query_length + 1),
    }
