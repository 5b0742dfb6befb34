"""Health and metrics API routes."""

from fastapi import APIRouter, Depends, Response

from portfolio_search.api.routes.search import get_search_service
from portfolio_search.api.schemas import HealthResponseSchema, IndexStatusSchema
from portfolio_search.api.service import SearchService
from portfolio_search.observability import get_metrics

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponseSchema)
async def health_check(service: SearchService = Depends(get_search_service)):
    """
    Health check endpoint.

    Reports the active index snapshot without building one. The service is
    "degraded" until the first search has built the index.
    """
    index = IndexStatusSchema(**service.index_manager.get_status())
    return HealthResponseSchema(
        status="healthy" if index.ready else "degraded",
        index=index,
        cache_size=service.cache.size,
    )


@router.get("/metrics")
async def metrics():
    """Get Prometheus metrics."""
    data, content_type = get_metrics()
    return Response(content=data, media_type=content_type)
