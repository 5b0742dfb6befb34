"""Models package."""

from portfolio_search.models.content import (
    RECORD_TYPES,
    ExperienceContent,
    ProfileContent,
    ProjectContent,
    RecordMetadata,
    RecordType,
    SearchableRecord,
    SkillContent,
    Technology,
    WritingContent,
)
from portfolio_search.models.search import (
    HighlightSegment,
    Highlights,
    SearchOptions,
    SearchResult,
)

__all__ = [
    "RECORD_TYPES",
    "ExperienceContent",
    "HighlightSegment",
    "Highlights",
    "ProfileContent",
    "ProjectContent",
    "RecordMetadata",
    "RecordType",
    "SearchOptions",
    "SearchResult",
    "SearchableRecord",
    "SkillContent",
    "Technology",
    "WritingContent",
]
