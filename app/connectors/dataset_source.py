"""
app/connectors/dataset_source.py

Sources for the raw statistics export.

A source only returns text; parsing and aggregation happen downstream.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

import requests

from app.config import DatasetSettings, ExternalHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class DatasetLoadError(RuntimeError):
    """
    Raised when the raw export cannot be read.
    """


class DatasetSource(ABC):
    """
    Provides the raw CSV text of the statistics export.
    """

    name: str

    @abstractmethod
    def load_text(self) -> str:
        """
        Return the full export as text.

        Raises DatasetLoadError on failure.
        """


class FileDatasetSource(DatasetSource):
    """
    Reads the export from a local file.
    """

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load_text(self) -> str:
        try:
            text = self._path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as exc:
            raise DatasetLoadError(f"Dataset file not found: {self._path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DatasetLoadError(f"Dataset file could not be read: {self._path}") from exc
        logger.info("Dataset loaded source=file path=%s bytes=%d", self._path, len(text))
        return text


class HTTPDatasetSource(DatasetSource):
    """
    Downloads the export over HTTP with retry and exponential backoff.

    429 and 5xx responses, timeouts and connection errors are retried.
    Other HTTP errors fail immediately.
    """

    name = "http"

    def __init__(
        self,
        url: str,
        *,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._sleep = sleep

    def load_text(self) -> str:
        response = self._request()
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8-sig"
        text = response.text
        logger.info("Dataset loaded source=http url=%s bytes=%d", self._url, len(text))
        return text

    def _request(self) -> requests.Response:
        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.get(self._url, timeout=self._timeout_seconds)
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Dataset request failed status=%s url=%s error=%s",
                        status_code,
                        self._url,
                        exc,
                    )
                    raise DatasetLoadError("Dataset download failed with a non-retryable status.") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Dataset request retry attempt=%s/%s wait_seconds=%.2f url=%s",
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                self._url,
            )
            self._sleep(backoff_seconds)

        logger.error("Dataset request exhausted retries url=%s error=%s", self._url, last_error)
        raise DatasetLoadError("Dataset download failed after retries.") from last_error


def build_dataset_source(
    settings: DatasetSettings,
    http_settings: ExternalHTTPSettings,
) -> DatasetSource:
    """
    Prefer the remote URL when configured, otherwise the local path.
    """

    if settings.csv_url:
        return HTTPDatasetSource(settings.csv_url, http_settings=http_settings)
    return FileDatasetSource(settings.csv_path)
