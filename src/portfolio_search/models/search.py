"""Search request and result models with highlight segments."""

from pydantic import BaseModel, Field

from portfolio_search.models.content import RecordType, SearchableRecord


class SearchOptions(BaseModel):
    """Options narrowing a search."""

    limit: int = Field(default=20, ge=1)
    type: RecordType | None = None
    category: str | None = None


class HighlightSegment(BaseModel):
    """A contiguous run of field text, marked when it belongs to a match."""

    text: str
    matched: bool = False


class Highlights(BaseModel):
    """Highlight segments per searchable field."""

    title: list[HighlightSegment] = Field(default_factory=list)
    description: list[HighlightSegment] = Field(default_factory=list)
    tags: list[list[HighlightSegment]] = Field(default_factory=list)
    technologies: list[list[HighlightSegment]] = Field(default_factory=list)


class SearchResult(SearchableRecord):
    """A record matched by a query, with its relevance and highlights."""

    relevance: float = Field(default=0.0, ge=0.0, le=1.0)
    highlights: Highlights = Field(default_factory=Highlights)
