"""API Pydantic schemas for responses that are not plain domain models."""

from pydantic import BaseModel, Field


# ===== Errors =====

class ErrorResponseSchema(BaseModel):
    """Body returned for domain errors."""

    error: str
    detail: str
    suggestions: list[str] = Field(default_factory=list)


# ===== Stats =====

class CacheStatsSchema(BaseModel):
    """Cache statistics."""

    size: int = 0
    keys: list[str] = Field(default_factory=list)
    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    hit_rate: float = 0.0


class StatsResponseSchema(BaseModel):
    """Search statistics response schema."""

    total_items: int
    by_type: dict[str, int]
    index_version: str
    last_updated: str
    generated_at: str
    cache: CacheStatsSchema


class InvalidateResponseSchema(BaseModel):
    status: str = "invalidated"
    message: str


# ===== Health =====

class IndexStatusSchema(BaseModel):
    """Status of the active index snapshot."""

    ready: bool = False
    records: int = 0
    current_version: str | None = None
    built_at: str | None = None


class HealthResponseSchema(BaseModel):
    """Health check response schema."""

    status: str
    index: IndexStatusSchema
    cache_size: int = 0
