"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables each time it is instantiated.  Defaults are
provided for all fields so the service starts without any
configuration on a developer machine.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env(name: str, default: str):
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = _env("PROJECT_NAME", "Old Cars API")
    api_version: str = _env("API_VERSION", "1.0.0")
    debug: bool = field(
        default_factory=lambda: os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    )
    log_level: str = _env("LOG_LEVEL", "INFO")
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    # Path or ``sqlite:///`` URL of the car database.  A relative path is
    # resolved against the package root by the ``db`` module.
    database_url: str = _env("DATABASE_URL", "oldcars.db")

    # Seconds a connection waits for a lock held by another connection
    # before giving up with "database is locked".
    database_timeout: float = field(
        default_factory=lambda: float(os.getenv("DATABASE_TIMEOUT", "5"))
    )

    # Prefix for all routes.  Empty by default so cars live at ``/cars``.
    api_prefix: str = _env("API_PREFIX", "")

    host: str = _env("HOST", "127.0.0.1")
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
