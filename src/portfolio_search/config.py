"""Configuration management using pydantic-settings."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Content sources
    data_dir: Path = Path("data")
    content_base_url: str | None = None
    source_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: str = "http://localhost:3000"

    # Cache
    content_ttl_seconds: float = 300.0
    index_ttl_seconds: float = 600.0
    stale_ttl_seconds: float = 300.0

    # Search
    default_limit: int = 20
    max_limit: int = 50
    max_suggestions: int = 10
    min_query_length: int = 2
    max_query_length: int = 100
    max_special_char_ratio: float = 0.5
    fuzzy_threshold: float = 0.3

    # Query pipeline
    debounce_ms: int = 300
    min_search_interval_ms: int = 300


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
