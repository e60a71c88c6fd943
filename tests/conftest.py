"""Shared test fixtures for bnetapi.

Provides reusable fixtures for isolated config environments, global
output state, mock HTTP transports and ready-made executors. These
fixtures are discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from bnetapi.auth import TokenManager, reset_token_managers
from bnetapi.cache import MemoryBackend, ResponseCache
from bnetapi.client import RequestExecutor
from bnetapi.models import Config
from bnetapi.output import OutputFormat, OutputManager, reset_output, set_output
from bnetapi.transport import Transport




# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals() -> None:
    """Reset the global OutputManager and the shared token managers."""
    yield
    reset_output()
    reset_token_managers()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    BNET_* environment variables and changes into tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("bnetapi.config._is_xdg_platform", lambda: True)

    for var in [
        "BNET_CLIENT_ID",
        "BNET_CLIENT_SECRET",
        "BNET_REGION",
        "BNET_USE_CACHE",
        "BNET_CACHE_URL",
        "BNET_FORMAT",
        "BNET_ACCESS_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config() -> Config:
    """A config with literal credentials and caching enabled in memory."""
    return Config(
        client_id="client-id",
        client_secret="client-secret",
        use_cache=True,
        cache_url="memory://",
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """Records requests and answers token and API calls from canned data.

    ``routes`` maps a URL path to ``(status, body)``; unknown paths get 404.
    Token requests are answered with ``token_status`` / ``token_body``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, tuple[int, Any]] = {}
        self.token_status = 200
        self.token_body: Any = {"access_token": "token-1", "expires_in": 3600}
        self.token_calls = 0

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/oauth/token"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token":
            self.token_calls += 1
            return _make_response(self.token_status, self.token_body)
        status, body = self.routes.get(request.url.path, (404, {"detail": "Not Found"}))
        return _make_response(status, body)


def _make_response(status: int, body: Any) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    if isinstance(body, (bytes, str)):
        return httpx.Response(status, content=body)
    return httpx.Response(
        status,
        content=json.dumps(body).encode(),
        headers={"content-type": "application/json"},
    )


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def transport(fake_api: FakeApi) -> Transport:
    """A Transport whose per-call clients talk to :class:`FakeApi`."""
    return Transport(transport=httpx.MockTransport(fake_api.handler))


class FakeClock:
    """Controllable UTC clock for token expiry tests."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_manager(config: Config, transport: Transport, clock: FakeClock) -> TokenManager:
    return TokenManager(config, transport=transport, clock=clock)


@pytest.fixture
def make_executor(
    config: Config,
    token_manager: TokenManager,
    transport: Transport,
) -> Callable[..., RequestExecutor]:
    """Factory for executors sharing the fake transport and a memory cache."""

    def _make(**kwargs: Any) -> RequestExecutor:
        kwargs.setdefault("token_manager", token_manager)
        kwargs.setdefault("cache", ResponseCache(MemoryBackend()))
        kwargs.setdefault("transport", transport)
        return RequestExecutor(kwargs.pop("config", config), **kwargs)

    return _make
