"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application Settings
    app_env: str = "development"
    debug: bool = True
    app_name: str = "Syslog Analyzer"
    log_level: str = "INFO"

    # Ollama Configuration (defaults for the hot-swappable EnrichmentConfig)
    ollama_endpoint: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_timeout_seconds: float = 60.0
    ollama_connect_timeout_seconds: float = 10.0

    # Enrichment
    enrichment_concurrency: int = 4
    batch_limit: int = 20
    analysis_max_chars: int = 200

    # Database (rules only; log entries are never persisted)
    database_path: str = "data/syslog_analyzer.db"

    # Listener
    default_listen_port: int = 514


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(debug: bool = False, level: Optional[str] = None) -> None:
    """
    Configure root logging for the process.

    Args:
        debug: If True, log at DEBUG regardless of `level`
        level: Optional level name (e.g. 'INFO'); defaults to INFO
    """
    if debug:
        lvl = logging.DEBUG
    elif level is not None:
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = logging.INFO

    root = logging.getLogger()
    # Don't stack handlers when the app is reloaded
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(lvl)
