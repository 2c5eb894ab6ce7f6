"""
Application configuration using Pydantic Settings for type safety and validation.
Loads from environment variables with sensible defaults for development.
"""

import json
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the transit snapshot service."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Application
    app_name: str = "Transit Snapshot API"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable debug mode")
    
    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]
    
    # Static schedule dataset
    gtfs_data_dir: str = "data"
    gtfs_static_url: Optional[str] = None
    gtfs_download_on_startup: bool = False
    gtfs_download_timeout: float = Field(default=120.0, gt=0)
    
    # Geometry
    simplify_tolerance: float = Field(
        default=0.0001, ge=0, description="Douglas-Peucker tolerance in degrees"
    )
    geometry_refresh_seconds: int = Field(
        default=0, ge=0, description="Seconds between geometry rebuilds, 0 disables"
    )
    
    # Live feeds
    feed_urls: Annotated[list[str], NoDecode] = Field(default_factory=list)
    feed_timeout: float = Field(default=10.0, gt=0, description="Per-feed timeout in seconds")
    
    @field_validator("feed_urls", mode="before")
    def split_feed_urls(cls, v):
        """Accept a JSON list or a comma-separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [url.strip() for url in v.split(",") if url.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance to avoid repeated parsing."""
    return Settings()
