"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; in a deployment you should
override at least ``DATABASE_URL``.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Books and Authors API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.  Each pooled
    # connection opens its own handle, so ``:memory:`` is not supported.
    database_url: str = os.getenv("DATABASE_URL", "book_catalog.db")

    # Upper bound on simultaneously open connections.
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "10"))

    # Seconds a request waits for a free connection before failing.
    db_pool_timeout: float = float(os.getenv("DB_POOL_TIMEOUT", "5"))

    # Create the ``books`` and ``authors`` tables at startup when missing.
    db_create_schema: bool = _env_flag("DB_CREATE_SCHEMA", "true")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
