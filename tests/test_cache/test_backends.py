"""Tests for the cache storage backends and create_backend()."""

from __future__ import annotations

import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bnetapi.cache import DiskBackend, MemoryBackend, RedisBackend, create_backend
from bnetapi.exceptions import ConfigurationError

KEY = "https://eu.api.blizzard.com/data/wow/item/19019?namespace=static-eu"


class TestMemoryBackend:
    def test_roundtrip(self) -> None:
        backend = MemoryBackend()
        backend.set(KEY, b"data", 60)
        assert backend.get(KEY) == b"data"
        assert backend.size() == 1

    def test_entry_expires(self) -> None:
        backend = MemoryBackend()
        backend.set(KEY, b"data", 1)
        time.sleep(1.2)
        assert backend.get(KEY) is None
        assert backend.size() == 0

    def test_delete_missing_is_ignored(self) -> None:
        MemoryBackend().delete("nope")


class TestDiskBackend:
    def test_roundtrip(self, tmp_path: Path) -> None:
        backend = DiskBackend(tmp_path)
        backend.set(KEY, b"data", 60)
        assert backend.get(KEY) == b"data"
        backend.close()

    def test_entry_expires(self, tmp_path: Path) -> None:
        backend = DiskBackend(tmp_path)
        backend.set(KEY, b"data", 1)
        time.sleep(1.5)
        assert backend.get(KEY) is None
        backend.close()

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        first = DiskBackend(tmp_path)
        first.set(KEY, b"data", 60)
        first.close()

        second = DiskBackend(tmp_path)
        assert second.get(KEY) == b"data"
        second.close()

    def test_clear(self, tmp_path: Path) -> None:
        backend = DiskBackend(tmp_path)
        backend.set(KEY, b"data", 60)
        backend.clear()
        assert backend.size() == 0
        backend.close()


class TestRedisBackend:
    def test_set_uses_setex(self) -> None:
        client = MagicMock()
        RedisBackend(client=client).set(KEY, b"data", 3600)
        client.setex.assert_called_once_with(KEY, 3600, b"data")

    def test_get_and_delete(self) -> None:
        client = MagicMock()
        client.get.return_value = b"data"
        backend = RedisBackend(client=client)

        assert backend.get(KEY) == b"data"
        backend.delete(KEY)
        client.delete.assert_called_once_with(KEY)

    def test_clear_only_drops_url_keys(self) -> None:
        client = MagicMock()
        client.scan_iter.return_value = iter([b"https://a", b"https://b"])
        RedisBackend(client=client).clear()

        client.scan_iter.assert_called_once_with(match="http*")
        assert client.delete.call_count == 2

    def test_describe_is_url(self) -> None:
        backend = RedisBackend("redis://cache:6379/2", client=MagicMock())
        assert backend.describe() == "redis://cache:6379/2"
        assert backend.size() is None


class TestCreateBackend:
    def test_redis_url(self) -> None:
        backend = create_backend("redis://localhost:6379/0")
        assert isinstance(backend, RedisBackend)

    def test_memory_url(self) -> None:
        assert isinstance(create_backend("memory://"), MemoryBackend)

    def test_disk_url_with_path(self, tmp_path: Path) -> None:
        backend = create_backend(f"disk://{tmp_path / 'responses'}")
        assert isinstance(backend, DiskBackend)
        assert backend.describe() == str(tmp_path / "responses")
        backend.close()

    def test_disk_url_defaults_to_cache_dir(self, isolated_config: Path) -> None:
        backend = create_backend("disk://")
        assert backend.describe() == str(isolated_config / "cache" / "bnetapi" / "responses")
        backend.close()

    def test_unknown_scheme_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported cache backend"):
            create_backend("memcached://localhost")
