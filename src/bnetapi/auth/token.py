"""OAuth2 client-credentials token management.

This module provides :class:`TokenManager`, which performs the
non-interactive Client Credentials grant (:rfc:`6749` section 4.4) against
the Battle.net token endpoint and keeps the resulting bearer token for
reuse.

Token lifecycle::

    Absent -> Valid -> NearExpiry -> Refreshing -> Valid

A token is never handed out within :data:`TOKEN_EXPIRY_MARGIN` seconds of
its expiry. Refreshes are single-flight: the first caller that observes an
absent or expiring token performs the round trip, and every caller that
arrives while it is in flight waits for and receives that same result
(or the same error).

The token is process-wide shared state. :func:`get_token_manager` returns
one manager per credential set so that independent executors do not each
create tokens.
"""

from __future__ import annotations

import hashlib
import threading
from concurrent.futures import Future
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import httpx

from bnetapi.config import resolve_credential
from bnetapi.exceptions import AuthError, ConfigurationError, TransportError
from bnetapi.models import AccessToken, Config
from bnetapi.output import debug
from bnetapi.transport import Transport

TOKEN_EXPIRY_MARGIN = 60
"""Seconds before ``expires_at`` after which a token is refreshed."""

DEFAULT_TOKEN_LIFETIME = 3600
"""Lifetime assumed when the token endpoint omits ``expires_in``."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """Owns the shared access token and its refresh.

    Args:
        config: Client configuration (credentials, region, auth host).
        transport: Transport used for the token endpoint.
        clock: Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[Transport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config
        self._transport = transport or Transport.from_config(config)
        self._clock = clock or _utcnow
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()
        self._in_flight: Optional[Future[AccessToken]] = None

    @property
    def token_url(self) -> str:
        return f"https://{self._config.region.value}.{self._config.auth_host}/oauth/token"

    def get_valid_token(self) -> AccessToken:
        """Return a token valid for at least :data:`TOKEN_EXPIRY_MARGIN` seconds.

        Raises:
            AuthError: If the token endpoint fails or returns an unusable body.
            ConfigurationError: If client credentials are missing.
        """
        token = self._token
        if self._usable(token):
            return token

        with self._lock:
            token = self._token
            if self._usable(token):
                return token
            future = self._in_flight
            leader = future is None
            if leader:
                future = self._in_flight = Future()

        if not leader:
            return future.result()

        try:
            token = self._refresh()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            self._token = token
            future.set_result(token)
        finally:
            with self._lock:
                self._in_flight = None
        return token

    def get_valid_token_value(self) -> str:
        """Shortcut for ``get_valid_token().value``."""
        return self.get_valid_token().value

    def invalidate(self) -> None:
        """Drop the stored token so the next call refreshes."""
        with self._lock:
            self._token = None

    def _usable(self, token: Optional[AccessToken]) -> bool:
        return token is not None and not token.expires_within(
            TOKEN_EXPIRY_MARGIN, self._clock()
        )

    def _credentials(self) -> tuple[str, str]:
        if not self._config.client_id or not self._config.client_secret:
            raise ConfigurationError(
                "client_id and client_secret are required "
                "(set BNET_CLIENT_ID / BNET_CLIENT_SECRET or the config file)"
            )
        return (
            resolve_credential(self._config.client_id),
            resolve_credential(self._config.client_secret),
        )

    def _refresh(self) -> AccessToken:
        """POST to the token endpoint and build a new :class:`AccessToken`."""
        client_id, client_secret = self._credentials()
        debug(f"Token absent or expiring soon; refreshing from {self.token_url}")

        request = httpx.Request(
            "POST",
            self.token_url,
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        try:
            response = self._transport.send(
                request, auth=httpx.BasicAuth(client_id, client_secret)
            )
        except TransportError as exc:
            raise AuthError(f"Token request failed: {exc}") from exc

        if response.status_code != 200:
            raise AuthError(
                f"Token request to {self.token_url} failed with status "
                f"{response.status_code}: {response.text[:200]}"
            )

        try:
            token_data: Any = response.json()
        except ValueError as exc:
            raise AuthError(f"Token response from {self.token_url} is not valid JSON") from exc

        if not isinstance(token_data, dict) or not isinstance(
            token_data.get("access_token"), str
        ):
            raise AuthError("Token response missing 'access_token' field")

        expires_in = token_data.get("expires_in")
        try:
            lifetime = float(expires_in) if expires_in is not None else DEFAULT_TOKEN_LIFETIME
        except (TypeError, ValueError) as exc:
            raise AuthError(f"Token response has invalid 'expires_in': {expires_in!r}") from exc

        token = AccessToken(
            value=token_data["access_token"],
            expires_at=self._clock() + timedelta(seconds=lifetime),
        )
        debug(f"Token refreshed; expires at {token.expires_at.isoformat()}")
        return token


# ------------------------------------------------------------------ #
# Process-wide registry
# ------------------------------------------------------------------ #

_managers: dict[tuple[Any, ...], TokenManager] = {}
_managers_lock = threading.Lock()


def get_token_manager(config: Config) -> TokenManager:
    """Return the shared :class:`TokenManager` for *config*'s credentials.

    Managers are keyed by every setting that affects the token exchange,
    so every executor built from the same credentials shares one token
    and a changed secret never reuses a stale manager. The secret enters
    the key only as a digest.
    """
    secret_digest = hashlib.sha256((config.client_secret or "").encode()).hexdigest()
    key = (
        config.client_id or "",
        secret_digest,
        config.region.value,
        config.auth_host,
        config.timeout,
        config.verify_ssl,
    )
    with _managers_lock:
        manager = _managers.get(key)
        if manager is None:
            manager = _managers[key] = TokenManager(config)
        return manager


def reset_token_managers() -> None:
    """Forget every shared manager. Primarily useful in test suites."""
    with _managers_lock:
        _managers.clear()
