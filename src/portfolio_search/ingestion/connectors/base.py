"""Abstract base interface for content sources."""

from abc import ABC, abstractmethod
from typing import Any

from portfolio_search.errors import ContentLoadError
from portfolio_search.models.content import RecordType


class BaseContentSource(ABC):
    """
    Abstract base class for content sources.

    A source fetches one page document (for example the projects page data)
    and extracts its raw entries. Normalization into searchable records is
    left to the aggregator.
    """

    def __init__(self, name: str, record_type: RecordType, collection_key: str | None = None):
        """
        Args:
            name: Unique source name, also used in cache keys
            record_type: Record type every entry of this source becomes
            collection_key: Key of the entry list inside the document; None
                means the whole document is a single entry
        """
        self.name = name
        self.record_type = record_type
        self.collection_key = collection_key

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable label used in failure logs."""
        pass

    @abstractmethod
    async def fetch_document(self) -> Any:
        """
        Fetch the decoded page document.

        Raises:
            ContentLoadError: if the document cannot be fetched or decoded
        """
        pass

    async def load(self) -> list[dict]:
        """Fetch the document and return its raw entries."""
        document = await self.fetch_document()
        return self.extract_entries(document)

    def extract_entries(self, document: Any) -> list[dict]:
        """Pull the raw entries out of a page document."""
        if not isinstance(document, dict):
            raise ContentLoadError(self.name, "expected a JSON object")
        if self.collection_key is None:
            return [document]

        entries = document.get(self.collection_key)
        if isinstance(entries, dict):
            # Single-entry documents such as the profile page
            return [entries]
        if not isinstance(entries, list):
            raise ContentLoadError(self.name, f"missing '{self.collection_key}' collection")
        return entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, record_type={self.record_type!r})"
