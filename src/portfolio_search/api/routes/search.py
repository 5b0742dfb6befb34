"""Search API routes."""

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio_search.api.schemas import (
    ErrorResponseSchema,
    InvalidateResponseSchema,
    StatsResponseSchema,
)
from portfolio_search.api.service import SearchService
from portfolio_search.models.content import RecordType, WritingContent
from portfolio_search.models.search import SearchOptions, SearchResult
from portfolio_search.retrieval.filters import WritingFilters
from portfolio_search.search_utils import validate_search_query

router = APIRouter(prefix="/search", tags=["search"])
writing_router = APIRouter(prefix="/writing", tags=["writing"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponseSchema},
    503: {"model": ErrorResponseSchema},
}


# Dependency injection placeholder - will be set by app factory
_search_service: SearchService | None = None


def get_search_service() -> SearchService:
    """Dependency to get search service."""
    if _search_service is None:
        raise HTTPException(status_code=503, detail="Search service not initialized")
    return _search_service


def set_search_service(service: SearchService | None):
    """Set the search service instance."""
    global _search_service
    _search_service = service


@router.get("", response_model=list[SearchResult], responses=ERROR_RESPONSES)
async def search(
    q: str = Query(..., description="Search query"),
    type: RecordType | None = Query(default=None, description="Restrict to one record type"),
    category: str | None = None,
    limit: int = Query(default=20, description="Clamped to 1..max_limit"),
    service: SearchService = Depends(get_search_service),
):
    """
    Search portfolio content.

    Returns results ranked by relevance, with highlight segments per field.
    Unlike the core service, short queries are rejected here so clients get
    a reason instead of an empty list.
    """
    validate_search_query(q).raise_for_error()
    options = SearchOptions(limit=max(limit, 1), type=type, category=category)
    return await service.search(q, options)


@router.get("/suggest", response_model=list[str], responses=ERROR_RESPONSES)
async def suggest(
    q: str = Query(..., description="Partial query"),
    service: SearchService = Depends(get_search_service),
):
    """Autocomplete suggestions from titles, tags and technologies."""
    return await service.suggest(q)


@router.get("/stats", response_model=StatsResponseSchema, responses=ERROR_RESPONSES)
async def stats(service: SearchService = Depends(get_search_service)):
    """Index size by type, index version and cache statistics."""
    return await service.stats()


@router.post("/invalidate", response_model=InvalidateResponseSchema)
async def invalidate(service: SearchService = Depends(get_search_service)):
    """Drop cached content; the next search rebuilds the index."""
    service.invalidate()
    return InvalidateResponseSchema(message="Search cache cleared")


@writing_router.get("", response_model=list[WritingContent], responses=ERROR_RESPONSES)
async def list_writing(
    platform: str = "",
    category: str = "",
    search: str = "",
    featured: bool = False,
    service: SearchService = Depends(get_search_service),
):
    """List writing entries matching the platform, tag, text and featured filters."""
    filters = WritingFilters(
        platform=platform,
        category=category,
        search=search,
        featured=featured,
    )
    return await service.list_writings(filters)
