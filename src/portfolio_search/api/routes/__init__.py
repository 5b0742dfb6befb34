"""Routes package."""

from portfolio_search.api.routes.health import router as health_router
from portfolio_search.api.routes.search import router as search_router
from portfolio_search.api.routes.search import writing_router

__all__ = [
    "health_router",
    "search_router",
    "writing_router",
]
