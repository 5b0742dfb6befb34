"""Listing filters for the writing page."""

from dataclasses import dataclass, fields

from portfolio_search.models.content import WritingContent


@dataclass
class WritingFilters:
    """Filter state of the writing listing. Empty values are inactive."""

    platform: str = ""
    category: str = ""
    search: str = ""
    featured: bool = False


def subsequence_match(text: str, query: str) -> bool:
    """True if every character of ``query`` appears in ``text`` in order, ignoring case."""
    if not query.strip():
        return True
    remaining = iter(text.lower())
    return all(char in remaining for char in query.lower())


def matches_search(writing: WritingContent, query: str) -> bool:
    if not query.strip():
        return True
    searchable = " ".join(
        [writing.title, writing.description, writing.author or "", writing.source or "", *writing.tags]
    )
    return subsequence_match(searchable, query)


def matches_platform(writing: WritingContent, platform: str) -> bool:
    if not platform:
        return True
    return (writing.source or "").lower() == platform.lower()


def matches_category(writing: WritingContent, category: str) -> bool:
    if not category:
        return True
    return any(tag.lower() == category.lower() for tag in writing.tags)


def matches_featured(writing: WritingContent, featured: bool) -> bool:
    if not featured:
        return True
    return writing.featured


def filter_writings(writings: list[WritingContent], filters: WritingFilters) -> list[WritingContent]:
    """Apply every active filter; an entry must pass all of them."""
    return [
        w
        for w in writings
        if matches_search(w, filters.search)
        and matches_platform(w, filters.platform)
        and matches_category(w, filters.category)
        and matches_featured(w, filters.featured)
    ]


def unique_platforms(writings: list[WritingContent]) -> list[str]:
    return sorted({w.source for w in writings if w.source})


def unique_categories(writings: list[WritingContent]) -> list[str]:
    return sorted({tag for w in writings for tag in w.tags})


def default_filters() -> WritingFilters:
    return WritingFilters()


def has_active_filters(filters: WritingFilters) -> bool:
    return filters != default_filters()


def filter_stats(writings: list[WritingContent], filters: WritingFilters) -> dict:
    """Summarize a filter application for analytics."""
    active = sum(1 for f in fields(filters) if getattr(filters, f.name) not in ("", False))
    return {
        "total": len(writings),
        "filtered": len(filter_writings(writings, filters)),
        "active_filters": active,
        "platforms": len(unique_platforms(writings)),
        "categories": len(unique_categories(writings)),
        "featured": sum(1 for w in writings if w.featured),
    }
