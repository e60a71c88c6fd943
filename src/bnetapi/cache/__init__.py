"""Response caching for bnetapi.

This package provides :class:`ResponseCache`, a TTL cache for raw API
response bodies keyed by the resolved request URL, and the storage
backends it can sit on: :class:`RedisBackend` (networked),
:class:`DiskBackend` (:mod:`diskcache`) and :class:`MemoryBackend`.

The cache is consumed by :class:`~bnetapi.client.executor.RequestExecutor`
and is controlled by ``use_cache`` and ``cache_url`` in
:class:`~bnetapi.models.Config`.
"""

from bnetapi.cache.backends import (
    CacheBackend,
    DiskBackend,
    MemoryBackend,
    RedisBackend,
    create_backend,
)
from bnetapi.cache.cache import ResponseCache

__all__ = [
    "CacheBackend",
    "DiskBackend",
    "MemoryBackend",
    "RedisBackend",
    "ResponseCache",
    "create_backend",
]
