"""TTL response cache sitting in front of every outbound API call.

:class:`ResponseCache` stores raw response bodies keyed by the fully
resolved request URL (query string included), so distinct option
combinations never collide. Entries expire through the backend's own TTL
handling; nothing here sweeps them.

When caching is disabled no backend is constructed at all. ``get`` then
reports a miss and ``set`` does nothing, without touching the network or
the filesystem.

See Also:
    :mod:`bnetapi.cache.backends` -- the pluggable storage backends.
    :class:`~bnetapi.client.executor.RequestExecutor` -- decides when the
    cache may be consulted.
"""

from __future__ import annotations

from typing import Any, Optional

from bnetapi.cache.backends import CacheBackend, create_backend
from bnetapi.models import Config
from bnetapi.output import debug


class ResponseCache:
    """Byte cache for API response bodies.

    Args:
        backend: Storage backend. ``None`` means caching is disabled.

    Example::

        from bnetapi.cache import MemoryBackend, ResponseCache

        cache = ResponseCache(MemoryBackend())
        cache.set("https://us.api.blizzard.com/data/wow/realm/index", b"{}", ttl=60)
        hit = cache.get("https://us.api.blizzard.com/data/wow/realm/index")
    """

    def __init__(self, backend: Optional[CacheBackend] = None) -> None:
        self._backend = backend

    @classmethod
    def from_config(cls, config: Config) -> ResponseCache:
        """Build a cache honouring ``config.use_cache`` and ``config.cache_url``."""
        if not config.use_cache:
            return cls(None)
        return cls(create_backend(config.cache_url))

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    def get(self, key: str) -> Optional[bytes]:
        """Return the cached body for *key*, or ``None`` on a miss or when disabled."""
        if self._backend is None:
            return None
        value = self._backend.get(key)
        debug(f"Cache {'hit' if value is not None else 'miss'}: {key}")
        return value

    def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds. No-op when disabled."""
        if self._backend is None:
            return
        self._backend.set(key, value, ttl)
        debug(f"Cached {len(value)} bytes for {ttl}s: {key}")

    def invalidate(self, key: str) -> None:
        """Remove a single entry."""
        if self._backend is not None:
            self._backend.delete(key)

    def clear(self) -> None:
        """Remove all entries from the backend."""
        if self._backend is not None:
            self._backend.clear()

    def stats(self) -> dict[str, Any]:
        """Return ``{"enabled": False}``, or the backend description and size."""
        if self._backend is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "backend": self._backend.describe(),
            "size": self._backend.size(),
        }

    def close(self) -> None:
        """Close the underlying backend and release resources."""
        if self._backend is not None:
            self._backend.close()
