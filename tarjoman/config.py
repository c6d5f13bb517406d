"""
Application configuration.

Loads settings from environment variables (prefixed ``TARJOMAN_``) with
sensible defaults.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="TARJOMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Storage
    # ==========================================================================

    database_path: str = "./data/tarjoman.db"

    # Settings keys owned by the credential rotator
    api_keys_setting: str = "apiKeys"
    key_index_setting: str = "lastKeyIndex"

    # ==========================================================================
    # Gemini
    # ==========================================================================

    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-pro"
    request_timeout: float = 60.0

    # Language the model should use for names of newly discovered languages
    display_language: str = "Persian"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def generate_content_url(self) -> str:
        """Full URL of the model's generateContent endpoint."""
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for an entry point."""
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if settings.debug:
        level_name = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
