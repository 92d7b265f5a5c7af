"""Application configuration loaded from environment variables."""

from __future__ import annotations

import functools

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Signal relay settings.

    Every field has a default, so the relay starts with no environment at
    all. Values may be overridden via environment variables (or ``.env``).
    """

    cors_origins: str = "http://localhost:3000,http://yourvibes.duckdns.org:3000"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        """``cors_origins`` split on commas, blanks removed."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@functools.lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance (singleton)."""
    return Settings()
