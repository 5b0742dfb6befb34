"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_search.api.routes import health_router, search_router, writing_router
from portfolio_search.api.routes.search import set_search_service
from portfolio_search.api.schemas import ErrorResponseSchema
from portfolio_search.api.service import SearchService
from portfolio_search.config import get_settings
from portfolio_search.errors import QueryValidationError, SearchError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup; a service injected through create_app() is kept
    created = False
    if app.state.search_service is None:
        app.state.search_service = SearchService.create()
        created = True
    set_search_service(app.state.search_service)
    logger.info("search_service_ready")

    yield

    # Shutdown
    if created:
        set_search_service(None)


async def search_error_handler(request: Request, exc: SearchError) -> JSONResponse:
    """Answer domain errors with their status code and a uniform body."""
    body = ErrorResponseSchema(
        error=type(exc).__name__,
        detail=exc.message,
        suggestions=exc.suggestions if isinstance(exc, QueryValidationError) else [],
    )
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer malformed query parameters as a bad request, like other query errors."""
    problems = [
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    ]
    body = ErrorResponseSchema(error=type(exc).__name__, detail="; ".join(problems))
    return JSONResponse(status_code=400, content=body.model_dump())


def create_app(service: SearchService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Portfolio Search",
        description="Fuzzy search over portfolio projects, writing and experience",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.search_service = service
    if service is not None:
        set_search_service(service)

    # CORS for frontend
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SearchError, search_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register routes
    app.include_router(search_router)
    app.include_router(writing_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        return {
            "name": "Portfolio Search",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app


# Create app instance for uvicorn
app = create_app()
