"""
app/repositories/cache_storage.py

Durable backends for the response cache.

A backend stores one opaque text blob (the JSON-serialized cache mapping) and
hands it back on the next process start. Backends know nothing about cache
keys or entries.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import CACHE_BACKEND_DATABASE, CacheSettings
from db.models.cache_snapshot import CacheSnapshot

logger = logging.getLogger(__name__)


class CacheStorageError(RuntimeError):
    """
    Raised when the cache blob cannot be read from or written to storage.
    """


class CacheStorage(Protocol):
    """
    Durable key-value store holding one serialized cache mapping.
    """

    def load(self) -> str | None:
        """Return the stored blob, or None when nothing has been saved yet."""
        ...

    def save(self, blob: str) -> None:
        """Replace the stored blob."""
        ...


class InMemoryCacheStorage:
    """
    Process-local backend; nothing survives a restart.
    """

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob

    def load(self) -> str | None:
        return self.blob

    def save(self, blob: str) -> None:
        self.blob = blob


class FileCacheStorage:
    """
    Local filesystem backend writing one JSON file.

    Writes go to a temporary sibling first and are moved into place, so a
    crash mid-write never leaves a truncated cache file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheStorageError(f"Failed to read cache file {self._path}.") from exc

    def save(self, blob: str) -> None:
        tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(blob, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise CacheStorageError(f"Failed to write cache file {self._path}.") from exc


class SQLCacheStorage:
    """
    Database backend keeping the blob in one ``cache_snapshots`` row.

    Parameters
    ----------
    session_factory:
        Callable returning a new SQLAlchemy session. Each load/save opens and
        closes its own session.
    namespace:
        Primary key of the row holding this cache.
    """

    def __init__(self, session_factory: Callable[[], Session], *, namespace: str) -> None:
        self._session_factory = session_factory
        self._namespace = namespace

    def load(self) -> str | None:
        try:
            with self._session_factory() as session:
                snapshot = session.get(CacheSnapshot, self._namespace)
                return snapshot.payload if snapshot is not None else None
        except SQLAlchemyError as exc:
            raise CacheStorageError(
                f"Failed to read cache snapshot namespace={self._namespace!r}."
            ) from exc

    def save(self, blob: str) -> None:
        session = self._session_factory()
        try:
            snapshot = session.get(CacheSnapshot, self._namespace)
            if snapshot is None:
                session.add(CacheSnapshot(namespace=self._namespace, payload=blob))
            else:
                snapshot.payload = blob
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise CacheStorageError(
                f"Failed to write cache snapshot namespace={self._namespace!r}."
            ) from exc
        finally:
            session.close()
        logger.debug("Cache snapshot saved namespace=%r bytes=%d", self._namespace, len(blob))


def build_cache_storage(settings: CacheSettings) -> CacheStorage:
    """
    Return the backend selected by ``CACHE_BACKEND``.
    """

    if settings.backend == CACHE_BACKEND_DATABASE:
        from db.session import get_session_factory

        return SQLCacheStorage(get_session_factory(), namespace=settings.namespace)
    return FileCacheStorage(settings.file_path)
