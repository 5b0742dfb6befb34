"""Content source reading page documents from local JSON files."""

import asyncio
import json
from pathlib import Path
from typing import Any

from portfolio_search.errors import ContentLoadError
from portfolio_search.ingestion.connectors.base import BaseContentSource
from portfolio_search.models.content import RecordType


class JsonFileSource(BaseContentSource):
    """Reads one content type from a JSON file such as ``data/projects.json``."""

    def __init__(
        self,
        name: str,
        record_type: RecordType,
        path: str | Path,
        collection_key: str | None = None,
    ):
        super().__init__(name, record_type, collection_key)
        self.path = Path(path)

    @property
    def source_name(self) -> str:
        return f"{self.name.title()} ({self.path.name})"

    async def fetch_document(self) -> Any:
        """Read and decode the JSON file off the event loop."""
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise ContentLoadError(self.name, f"cannot read {self.path}: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ContentLoadError(self.name, f"invalid JSON in {self.path}: {e}") from e
