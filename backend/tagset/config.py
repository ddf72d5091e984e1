from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TAGSET_",
        extra="ignore",
        case_sensitive=False,
    )

    log_level: str = "INFO"

    # Field name declared by `taggable()` when no path is given
    default_tag_path: str = "tags"

    # Storage
    store_backend: Literal["memory", "mongo", "supabase"] = "memory"

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "tagset"

    # Supabase
    supabase_url: str | None = None
    supabase_key: str | None = None


settings = Settings()
