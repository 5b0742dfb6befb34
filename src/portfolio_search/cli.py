"""Command-line interface for portfolio search."""

import argparse
import asyncio
import json
import sys

import structlog
import uvicorn

from portfolio_search.api.service import SearchService
from portfolio_search.config import get_settings
from portfolio_search.errors import SearchError
from portfolio_search.models.content import RECORD_TYPES
from portfolio_search.models.search import SearchOptions
from portfolio_search.retrieval.highlight import ANSI_HIGHLIGHTER
from portfolio_search.search_utils import format_result_description, type_label

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(0),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def cmd_serve(args):
    """Start the API server."""
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    logger.info("starting_server", host=host, port=port)

    uvicorn.run(
        "portfolio_search.api.app:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def cmd_search(args):
    """Search from the command line, highlighting matches in the terminal."""
    service = SearchService.create()
    options = SearchOptions(limit=args.limit, type=args.type, category=args.category)

    try:
        results = asyncio.run(service.search(args.query, options))
    except SearchError as e:
        logger.error("search_failed", query=args.query, error=e.message)
        sys.exit(1)

    print(f"\n Query: {args.query} | {len(results)} results\n")

    for i, result in enumerate(results, 1):
        title = ANSI_HIGHLIGHTER.to_markup(result.highlights.title) or result.title
        print(f"{i}. {title}")
        print(f"    {type_label(result.type)} | {result.category or '-'} | {result.url}")
        print(f"    Relevance: {result.relevance:.3f}")
        if result.highlights.description:
            description = ANSI_HIGHLIGHTER.to_markup(result.highlights.description)
        else:
            description = format_result_description(result.description)
        print(f"   {description}")
        print()


def cmd_suggest(args):
    """Print autocomplete suggestions for a partial query."""
    service = SearchService.create()
    try:
        suggestions = asyncio.run(service.suggest(args.query))
    except SearchError as e:
        logger.error("suggest_failed", query=args.query, error=e.message)
        sys.exit(1)

    for suggestion in suggestions:
        print(suggestion)


def cmd_stats(args):
    """Print index and cache statistics as JSON."""
    service = SearchService.create()
    try:
        stats = asyncio.run(service.stats())
    except SearchError as e:
        logger.error("stats_failed", error=e.message)
        sys.exit(1)

    print(json.dumps(stats, indent=2))


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="portfolio-search",
        description="Fuzzy search over portfolio content",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", type=str, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    # search command
    search_parser = subparsers.add_parser("search", help="Search content from CLI")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--limit", "-k", type=int, default=5, help="Number of results")
    search_parser.add_argument(
        "--type",
        "-t",
        choices=RECORD_TYPES,
        help="Restrict to one content type",
    )
    search_parser.add_argument("--category", "-c", help="Restrict to one category")
    search_parser.set_defaults(func=cmd_search)

    # suggest command
    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete a partial query")
    suggest_parser.add_argument("query", help="Partial query")
    suggest_parser.set_defaults(func=cmd_suggest)

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show index statistics")
    stats_parser.set_defaults(func=cmd_stats)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
