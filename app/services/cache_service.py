"""
app/services/cache_service.py

Get-or-compute cache with TTL freshness, stale fallback and durable mirror.

Entry lifecycle
---------------
    empty --(compute ok)--> fresh --(ttl elapses)--> stale
    stale --(compute ok)--> fresh
    stale --(compute fails)--> stale, served as fallback
    any   --(clear)--> empty

Staleness is evaluated lazily on read; nothing expires in the background.

The whole mapping is written to the storage backend after every successful
write or clear, and read back once when the service is constructed. A corrupt
or unreadable blob yields an empty cache.

Concurrent ``get_data`` calls for a key that is already being computed await
the same in-flight task, so ``compute_fn`` runs once per refresh.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Final, Union

from app.logging_utils import log_event
from app.repositories.cache_storage import CacheStorage, CacheStorageError, InMemoryCacheStorage

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS: Final[float] = 24 * 60 * 60

ComputeFn = Callable[[], Union[Any, Awaitable[Any]]]


@dataclass
class CacheEntry:
    """
    One cached payload and the UNIX time (seconds) it was stored.
    """

    data: Any
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "timestamp": self.timestamp}


class CacheService:
    """
    Keyed get-or-compute cache.

    Keys are opaque strings chosen by the caller. Payloads must be
    JSON-serializable.

    Parameters
    ----------
    storage:
        Durable backend for the serialized mapping. Defaults to an in-memory
        backend.
    ttl_seconds:
        Freshness window. Entries younger than this are served without
        recomputation.
    clock:
        Returns the current UNIX time in seconds.
    """

    def __init__(
        self,
        storage: CacheStorage | None = None,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage if storage is not None else InMemoryCacheStorage()
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[Any]] = {}
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def keys(self) -> list[str]:
        return list(self._entries)

    def get_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def is_fresh(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.age(self._clock()) < self._ttl_seconds

    def put(self, key: str, data: Any, *, timestamp: float | None = None) -> CacheEntry:
        """
        Store *data* under *key* and persist the cache.
        """

        entry = CacheEntry(data=data, timestamp=self._clock() if timestamp is None else timestamp)
        self._entries[key] = entry
        self._persist()
        return entry

    async def get_data(self, key: str, compute_fn: ComputeFn) -> Any:
        """
        Return the cached payload for *key*, computing it when missing or stale.

        *compute_fn* may be a plain or a coroutine function. When it raises
        and an entry exists for *key*, the stale payload is returned instead
        and the error is only logged. Without an entry the error propagates.
        """

        if self.is_fresh(key):
            log_event(logger, logging.DEBUG, "cache_hit", key=key)
            return self._entries[key].data

        task = self._inflight.get(key)
        if task is None:
            log_event(logger, logging.INFO, "cache_miss", key=key, stale=key in self._entries)
            task = asyncio.get_running_loop().create_task(self._refresh(key, compute_fn))
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._forget_inflight(key, done))
        else:
            log_event(logger, logging.DEBUG, "cache_join_inflight", key=key)

        return await asyncio.shield(task)

    def clear(self, key: str) -> bool:
        """
        Drop one key. Returns True when an entry was removed.
        """

        removed = self._entries.pop(key, None) is not None
        if removed:
            self._persist()
            log_event(logger, logging.INFO, "cache_clear", key=key)
        return removed

    def clear_all(self) -> None:
        """
        Drop every entry.
        """

        count = len(self._entries)
        self._entries = {}
        self._persist()
        log_event(logger, logging.INFO, "cache_clear_all", entries=count)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _refresh(self, key: str, compute_fn: ComputeFn) -> Any:
        try:
            result = compute_fn()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            entry = self._entries.get(key)
            if entry is None:
                logger.error("Cache compute failed key=%r without fallback: %s", key, exc)
                raise
            log_event(
                logger,
                logging.WARNING,
                "cache_stale_fallback",
                key=key,
                age_seconds=round(entry.age(self._clock()), 3),
                error=repr(exc),
            )
            return entry.data

        self.put(key, result)
        return result

    def _forget_inflight(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def _serialize(self) -> str:
        return json.dumps(
            {key: entry.to_dict() for key, entry in self._entries.items()},
            separators=(",", ":"),
        )

    def _persist(self) -> None:
        try:
            blob = self._serialize()
        except (TypeError, ValueError) as exc:
            logger.error("Cache payload is not JSON-serializable; skipping persist: %s", exc)
            return
        try:
            self._storage.save(blob)
        except CacheStorageError as exc:
            logger.error("Cache persist failed entries=%d: %s", len(self._entries), exc)
            return
        log_event(logger, logging.DEBUG, "cache_persist", entries=len(self._entries))

    def _load(self) -> None:
        try:
            blob = self._storage.load()
        except CacheStorageError as exc:
            logger.error("Cache storage unreadable; starting empty: %s", exc)
            return
        if not blob:
            return

        try:
            raw = json.loads(blob)
        except (TypeError, ValueError) as exc:
            logger.error("Persisted cache is corrupt; starting empty: %s", exc)
            return
        if not isinstance(raw, dict):
            logger.error("Persisted cache has unexpected shape %s; starting empty", type(raw).__name__)
            return

        for key, item in raw.items():
            entry = _entry_from_raw(item)
            if entry is None:
                logger.warning("Skipping malformed persisted cache entry key=%r", key)
                continue
            self._entries[key] = entry
        log_event(logger, logging.INFO, "cache_loaded", entries=len(self._entries))


def _entry_from_raw(item: object) -> CacheEntry | None:
    if not isinstance(item, dict) or "data" not in item:
        return None
    timestamp = item.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    return CacheEntry(data=item["data"], timestamp=float(timestamp))
