"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for bnetapi:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.bnetapi/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Config file** -- A single :class:`~bnetapi.models.Config` JSON file.
  See :func:`load_config_file` and :func:`save_config`.
* **Precedence resolution** -- :func:`load_config` merges explicit
  overrides, ``BNET_*`` environment variables and the config file into the
  effective configuration.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from literal values, env vars or files.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from bnetapi.exceptions import ConfigurationError
from bnetapi.models import Config

_APP_NAME = "bnetapi"
_CONFIG_FILENAME = "config.json"

ENV_VARS: dict[str, str] = {
    "BNET_CLIENT_ID": "client_id",
    "BNET_CLIENT_SECRET": "client_secret",
    "BNET_REGION": "region",
    "BNET_USE_CACHE": "use_cache",
    "BNET_CACHE_URL": "cache_url",
    "BNET_FORMAT": "format",
    "BNET_ACCESS_TOKEN": "access_token",
}
"""Environment variables read by :func:`load_config`, mapped to config fields."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/bnetapi/`` (default ``~/.config/bnetapi/``).
    On macOS/Windows: ``~/.bnetapi/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory used by the ``disk://`` backend, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/bnetapi/`` (default ``~/.cache/bnetapi/``).
    On macOS/Windows: ``~/.bnetapi/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/bnetapi/`` (default ``~/.local/share/bnetapi/``).
    On macOS/Windows: ``~/.bnetapi/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        # The file may hold a literal client secret.
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def config_file_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config_file(path: Optional[Path] = None) -> dict[str, Any]:
    """Read the raw config file as a dict.

    Args:
        path: Explicit file to read. Defaults to :func:`config_file_path`.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigurationError: If the file exists but is not a JSON object.
    """
    path = path or config_file_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigurationError(f"Invalid config file at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file at {path}: expected a JSON object")
    return data


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Persist *config* atomically and return the path written."""
    path = path or config_file_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def load_config(path: Optional[Path] = None, **overrides: Any) -> Config:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. Keyword *overrides* (``None`` values are ignored)
        2. Environment variables listed in :data:`ENV_VARS`
        3. The config file (*path*, default ``<config_dir>/config.json``)
        4. Model defaults

    Raises:
        ConfigurationError: If the merged values fail validation.
    """
    data = load_config_file(path)

    for env_var, field in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            data[field] = value

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Config.model_validate(data)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else -- returned unchanged as a literal value

    Raises:
        ConfigurationError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigurationError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc

    return source
