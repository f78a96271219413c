"""Runtime configuration sourced from the environment.

Values are read once and cached; call :func:`refresh_settings_cache` after
changing the environment (tests do this through ``monkeypatch``).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

Environment = Literal["dev", "prod"]

STORE_BATCH_LIMIT = 500
DEFAULT_MAX_BATCH_WRITES = 450


@dataclass(frozen=True)
class Settings:
    environment: Environment
    collection_prefix: str
    max_batch_writes: int
    log_level: str


def _normalize_environment(value: str | None) -> Environment:
    normalized = (value or "").strip().lower()
    if normalized in {"prod", "production"}:
        return "prod"
    return "dev"


def _read_batch_limit(value: str | None) -> int:
    if value is None or not value.strip():
        return DEFAULT_MAX_BATCH_WRITES
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring non-integer BRADOS_MAX_BATCH_WRITES=%r", value)
        return DEFAULT_MAX_BATCH_WRITES
    if parsed < 1 or parsed > STORE_BATCH_LIMIT:
        logger.warning("BRADOS_MAX_BATCH_WRITES=%s outside 1..%s, using default", parsed, STORE_BATCH_LIMIT)
        return DEFAULT_MAX_BATCH_WRITES
    return parsed


def load_settings(dotenv_path: str | None = None) -> Settings:
    """Load ``.env`` (without overriding the process environment) and rebuild settings."""
    load_dotenv(dotenv_path, override=False)
    refresh_settings_cache()
    return get_settings()


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings."""
    environment = _normalize_environment(os.getenv("BRADOS_ENV"))
    explicit_prefix = os.getenv("BRADOS_COLLECTION_PREFIX")
    if explicit_prefix is not None:
        prefix = explicit_prefix
    else:
        prefix = "" if environment == "prod" else "dev_"
    return Settings(
        environment=environment,
        collection_prefix=prefix,
        max_batch_writes=_read_batch_limit(os.getenv("BRADOS_MAX_BATCH_WRITES")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def collection_name(base: str) -> str:
    """Return the environment-qualified name for a top-level collection."""
    return f"{get_settings().collection_prefix}{base}"


def configure_logging() -> None:
    level_name = get_settings().log_level
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("brados").setLevel(level)
    logger.info("logging_configured: log_level=%s", level_name)


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
