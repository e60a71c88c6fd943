"""Tests for bnetapi.config -- XDG paths, atomic writes, precedence, credentials."""

from __future__ import annotations

import json
import stat
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from bnetapi.config import (
    _atomic_write,
    config_file_path,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    load_config,
    load_config_file,
    resolve_credential,
    save_config,
)
from bnetapi.exceptions import ConfigurationError
from bnetapi.models import Config, Region, ResponseFormat


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "bnetapi"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        result = get_config_dir()
        assert result == custom / "bnetapi"
        assert result.is_dir()

    def test_cache_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_cache"
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", str(custom))

        assert get_cache_dir() == custom / "bnetapi"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "bnetapi"


class TestXDGPathsFallback:
    """Non-XDG platforms use ~/.bnetapi."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".bnetapi"

    def test_cache_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_cache_dir() == tmp_path / ".bnetapi" / "cache"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_file_is_owner_only(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        _atomic_write(target, "{}")
        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("bnetapi.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


class TestConfigFile:
    def test_missing_file_returns_empty(self, isolated_config: Path) -> None:
        assert load_config_file() == {}

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        path = save_config(Config(client_id="abc", region=Region.EU, use_cache=True))
        assert path == config_file_path()

        config = load_config()
        assert config.client_id == "abc"
        assert config.region is Region.EU
        assert config.use_cache is True

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        config_file_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config_file()

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(config_file_path(), ["a", "b"])
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config_file()

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        _write_json(config_file_path(), {"region": "cn"})
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestLoadConfigPrecedence:
    def test_defaults(self, isolated_config: Path) -> None:
        config = load_config()
        assert config.region is Region.US
        assert config.client_id is None

    def test_env_overrides_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(config_file_path(), {"region": "eu", "format": "raw"})
        monkeypatch.setenv("BNET_REGION", "kr")

        config = load_config()
        assert config.region is Region.KR
        assert config.format is ResponseFormat.RAW

    def test_overrides_beat_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BNET_REGION", "kr")
        assert load_config(region="tw").region is Region.TW

    def test_none_override_ignored(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BNET_REGION", "eu")
        assert load_config(region=None).region is Region.EU

    def test_use_cache_from_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BNET_USE_CACHE", "true")
        monkeypatch.setenv("BNET_CACHE_URL", "memory://")

        config = load_config()
        assert config.use_cache is True
        assert config.cache_url == "memory://"

    def test_explicit_path(self, tmp_path: Path, isolated_config: Path) -> None:
        other = tmp_path / "other.json"
        _write_json(other, {"client_id": "from-other"})
        assert load_config(path=other).client_id == "from-other"


# ---------------------------------------------------------------------------
# Credential resolution
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_SECRET", "secret123")
        assert resolve_credential("env:MY_SECRET") == "secret123"

    def test_env_source_missing_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        with pytest.raises(ConfigurationError, match="not set"):
            resolve_credential("env:NONEXISTENT_VAR")

    def test_file_source(self, tmp_path: Path) -> None:
        cred_file = tmp_path / "secret.txt"
        cred_file.write_text("  my-secret  \n", encoding="utf-8")
        assert resolve_credential(f"file:{cred_file}") == "my-secret"

    def test_file_source_missing_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_credential("file:/nonexistent/path/secret.txt")

    def test_literal_passthrough(self) -> None:
        assert resolve_credential("plain-value") == "plain-value"
