"""Exception hierarchy for the search core.

Every error carries the HTTP status the API layer answers with, so routes
never have to translate domain errors by hand.
"""


class SearchError(Exception):
    """Base class for all search core errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QueryValidationError(SearchError):
    """Raised when a query is empty, too short, too long or mostly symbols."""

    status_code = 400

    def __init__(self, message: str, suggestions: list[str] | None = None):
        super().__init__(message)
        self.suggestions = suggestions or []


class ContentLoadError(SearchError):
    """Raised when a content source cannot be fetched or parsed."""

    status_code = 503

    def __init__(self, source: str, message: str):
        super().__init__(f"Failed to load content from {source}: {message}")
        self.source = source


class RecordValidationError(SearchError):
    """Raised for a single malformed record; the batch carries on without it."""

    status_code = 422

    def __init__(self, source: str, record_id: str | None, errors: list[str]):
        super().__init__(
            f"Invalid record {record_id or '<unknown>'} from {source}: {'; '.join(errors)}"
        )
        self.source = source
        self.record_id = record_id
        self.errors = errors


class SearchUnavailableError(SearchError):
    """Raised when the search index cannot be built from its sources."""

    status_code = 503
