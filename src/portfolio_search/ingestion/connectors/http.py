"""Content source fetching page documents from a remote content API."""

from typing import Any

import httpx

from portfolio_search.errors import ContentLoadError
from portfolio_search.ingestion.connectors.base import BaseContentSource
from portfolio_search.models.content import RecordType


class HttpJsonSource(BaseContentSource):
    """
    Fetches one content type from the site's content API.

    The API serves the same page documents as the JSON files, at
    ``{base_url}/{name}``.
    """

    def __init__(
        self,
        name: str,
        record_type: RecordType,
        url: str,
        collection_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            name: Unique source name
            record_type: Record type of every entry
            url: Absolute URL of the page document
            collection_key: Key of the entry list inside the document
            timeout: HTTP timeout in seconds
            client: Shared client to use instead of one per fetch
        """
        super().__init__(name, record_type, collection_key)
        self.url = url
        self.timeout = timeout
        self._client = client

    @property
    def source_name(self) -> str:
        return f"{self.name.title()} ({self.url})"

    def _get_headers(self) -> dict:
        """Get HTTP headers for the content API."""
        return {
            "Accept": "application/json",
            "User-Agent": "portfolio-search/0.1.0",
        }

    async def fetch_document(self) -> Any:
        """GET the page document and decode its JSON body."""
        if self._client is not None:
            return await self._fetch(self._client)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch(client)

    async def _fetch(self, client: httpx.AsyncClient) -> Any:
        try:
            response = await client.get(self.url, headers=self._get_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ContentLoadError(
                self.name, f"content API returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ContentLoadError(self.name, f"request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ContentLoadError(self.name, f"invalid JSON body: {e}") from e
