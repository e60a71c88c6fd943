"""Storage backends for :class:`~bnetapi.cache.cache.ResponseCache`.

Every backend is a string-keyed byte store with per-entry expiry:

* :class:`RedisBackend` -- a networked Redis server (``redis://``,
  ``rediss://``). Shared by every process pointing at the same server.
* :class:`DiskBackend` -- a local :mod:`diskcache` directory (``disk://``).
* :class:`MemoryBackend` -- a process-local dict (``memory://``), mostly for
  tests and short-lived scripts.

Use :func:`create_backend` to build one from a ``cache_url``.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import diskcache
import redis

from bnetapi.exceptions import ConfigurationError


class CacheBackend(ABC):
    """Minimal key/value contract with per-entry TTL (seconds)."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes for *key*, or ``None`` if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key*, replacing any previous entry, for *ttl* seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*. Missing keys are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry owned by this backend."""

    def size(self) -> Optional[int]:
        """Number of stored entries, when the backend can tell cheaply."""
        return None

    def describe(self) -> str:
        return type(self).__name__

    def close(self) -> None:
        """Release connections or file handles. Safe to call twice."""


class RedisBackend(CacheBackend):
    """Cache entries in Redis with ``SETEX``.

    Args:
        url: Redis connection URL (``redis://host:port/db``).
        client: Pre-built client, mainly for tests.
    """

    def __init__(self, url: str = "redis://localhost:6379/0", client: Any = None) -> None:
        self._url = url
        self._client = client if client is not None else redis.Redis.from_url(url)

    def get(self, key: str) -> Optional[bytes]:
        return self._client.get(key)

    def set(self, key: str, value: bytes, ttl: int) -> None:
        self._client.setex(key, ttl, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def clear(self) -> None:
        # Keys are full request URLs; only drop those.
        for key in self._client.scan_iter(match="http*"):
            self._client.delete(key)

    def describe(self) -> str:
        return self._url

    def close(self) -> None:
        self._client.close()


class DiskBackend(CacheBackend):
    """Cache entries in a local :class:`diskcache.Cache` directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._cache = diskcache.Cache(str(self._directory))

    def get(self, key: str) -> Optional[bytes]:
        return self._cache.get(key)

    def set(self, key: str, value: bytes, ttl: int) -> None:
        self._cache.set(key, value, expire=ttl)

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def clear(self) -> None:
        self._cache.clear()

    def size(self) -> Optional[int]:
        return len(self._cache)

    def describe(self) -> str:
        return str(self._directory)

    def close(self) -> None:
        self._cache.close()


class MemoryBackend(CacheBackend):
    """Process-local store. Expired entries are dropped on read."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, deadline = entry
            if time.monotonic() >= deadline:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: bytes, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (value, time.monotonic() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> Optional[int]:
        now = time.monotonic()
        with self._lock:
            return sum(1 for _, deadline in self._entries.values() if deadline > now)

    def describe(self) -> str:
        return "memory://"


def create_backend(cache_url: str) -> CacheBackend:
    """Build a backend from a cache URL.

    Supported schemes:
        - ``redis://`` / ``rediss://`` / ``unix://`` -- :class:`RedisBackend`
        - ``disk:///abs/path`` -- :class:`DiskBackend` at that path;
          ``disk://`` alone uses ``<cache_dir>/responses``
        - ``memory://`` -- :class:`MemoryBackend`

    Raises:
        ConfigurationError: For an unsupported scheme.
    """
    scheme = urlparse(cache_url).scheme.lower()
    if scheme in ("redis", "rediss", "unix"):
        return RedisBackend(cache_url)
    if scheme == "disk":
        path = urlparse(cache_url).path
        if not path or path == "/":
            from bnetapi.config import get_cache_dir

            return DiskBackend(get_cache_dir() / "responses")
        return DiskBackend(Path(path).expanduser())
    if scheme == "memory":
        return MemoryBackend()
    raise ConfigurationError(
        f"Unsupported cache backend '{cache_url}'. "
        "Use redis://, disk:// or memory://"
    )
