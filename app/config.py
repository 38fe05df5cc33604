"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

CACHE_BACKEND_FILE = "file"
CACHE_BACKEND_DATABASE = "database"
_ALLOWED_CACHE_BACKENDS = {CACHE_BACKEND_FILE, CACHE_BACKEND_DATABASE}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class DatasetSettings:
    """
    Where the statistics export comes from and which slice of it is served.

    ``state_name`` is matched against the export's ``state_name`` column;
    ``state_label`` is the display name written to district records.
    """

    csv_url: str | None = None
    csv_path: str = "data/mgnrega_maharashtra_2024_25.csv"
    state_name: str = "MAHARASHTRA"
    state_label: str = "Maharashtra"
    fin_year: str = "2024-2025"


@dataclass(frozen=True)
class CacheSettings:
    """
    Response cache settings.
    """

    ttl_seconds: float = 24 * 60 * 60
    backend: str = CACHE_BACKEND_FILE
    file_path: str = "data/cache/mgnrega_cache.json"
    namespace: str = "mgnregaCache"


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    HTTP behavior for fetching the export from a remote URL.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class LoggingSettings:
    """
    Root logger settings for the API process.
    """

    level: str = "INFO"


@lru_cache(maxsize=1)
def get_dataset_settings() -> DatasetSettings:
    """
    Return cached dataset settings from environment variables.
    """

    return DatasetSettings(
        csv_url=_get_optional_str_env("MGNREGA_CSV_URL"),
        csv_path=_get_str_env("MGNREGA_CSV_PATH", "data/mgnrega_maharashtra_2024_25.csv"),
        state_name=_get_str_env("MGNREGA_STATE_NAME", "MAHARASHTRA"),
        state_label=_get_str_env("MGNREGA_STATE_LABEL", "Maharashtra"),
        fin_year=_get_str_env("MGNREGA_FIN_YEAR", "2024-2025"),
    )


@lru_cache(maxsize=1)
def get_cache_settings() -> CacheSettings:
    """
    Return cached response-cache settings from environment variables.
    """

    return CacheSettings(
        ttl_seconds=max(0.0, _get_float_env("CACHE_TTL_SECONDS", 24 * 60 * 60)),
        backend=_get_str_env("CACHE_BACKEND", CACHE_BACKEND_FILE).lower(),
        file_path=_get_str_env("CACHE_FILE_PATH", "data/cache/mgnrega_cache.json"),
        namespace=_get_str_env("CACHE_NAMESPACE", "mgnregaCache"),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return HTTP settings for the remote dataset source.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return logging settings from environment variables.
    """

    return LoggingSettings(
        level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


def validate_settings(
    dataset: DatasetSettings,
    cache: CacheSettings,
) -> list[str]:
    """
    Return every configuration problem found; an empty list means valid.
    """

    errors: list[str] = []
    if cache.backend not in _ALLOWED_CACHE_BACKENDS:
        errors.append(
            f"CACHE_BACKEND '{cache.backend}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_CACHE_BACKENDS)}."
        )
    if cache.backend == CACHE_BACKEND_DATABASE:
        has_url = any(
            os.getenv(name, "").strip()
            for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")
        )
        if not has_url:
            errors.append(
                "CACHE_BACKEND=database but no database URL is configured. "
                "Set DATABASE_URL, CLOUD_DATABASE_URL or LOCAL_DATABASE_URL."
            )
    if dataset.csv_url is None and not dataset.csv_path:
        errors.append("No dataset source configured. Set MGNREGA_CSV_URL or MGNREGA_CSV_PATH.")
    if not dataset.fin_year:
        errors.append("MGNREGA_FIN_YEAR must not be empty.")
    return errors
