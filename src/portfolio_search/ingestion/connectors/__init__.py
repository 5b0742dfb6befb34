"""Connectors package."""

from portfolio_search.config import Settings, get_settings
from portfolio_search.ingestion.connectors.base import BaseContentSource
from portfolio_search.ingestion.connectors.http import HttpJsonSource
from portfolio_search.ingestion.connectors.json_file import JsonFileSource

# (source name, record type, collection key) for each content page of the site
SOURCE_LAYOUT = [
    ("projects", "project", "projects"),
    ("writing", "writing", "writings"),
    ("experience", "experience", "experience"),
    ("skills", "skill", "skills"),
    ("person", "profile", "person"),
]


def build_default_sources(settings: Settings | None = None) -> list[BaseContentSource]:
    """
    Build one source per content page.

    Reads from the content API when ``content_base_url`` is configured,
    otherwise from ``<data_dir>/<name>.json``.
    """
    settings = settings or get_settings()
    sources: list[BaseContentSource] = []
    for name, record_type, collection_key in SOURCE_LAYOUT:
        if settings.content_base_url:
            url = f"{settings.content_base_url.rstrip('/')}/{name}"
            sources.append(
                HttpJsonSource(
                    name,
                    record_type,
                    url,
                    collection_key=collection_key,
                    timeout=settings.source_timeout_seconds,
                )
            )
        else:
            path = settings.data_dir / f"{name}.json"
            sources.append(JsonFileSource(name, record_type, path, collection_key=collection_key))
    return sources


__all__ = [
    "BaseContentSource",
    "HttpJsonSource",
    "JsonFileSource",
    "SOURCE_LAYOUT",
    "build_default_sources",
]
