"""
app/repositories package marker.
"""

from app.repositories.cache_storage import (
    CacheStorage,
    CacheStorageError,
    FileCacheStorage,
    InMemoryCacheStorage,
    SQLCacheStorage,
    build_cache_storage,
)

__all__ = [
    "CacheStorage",
    "CacheStorageError",
    "FileCacheStorage",
    "InMemoryCacheStorage",
    "SQLCacheStorage",
    "build_cache_storage",
]
