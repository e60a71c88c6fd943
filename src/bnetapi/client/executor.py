"""Request execution: URL building, cache policy, token attachment, dispatch.

This module provides :class:`RequestExecutor`, the single path every API
call goes through. For one call it:

1. **Partitions options** -- control options (see
   :data:`~bnetapi.models.CONTROL_KEYS`) are split from API fields; only
   the latter are serialised as query parameters.
2. **Injects the namespace** -- a ``namespace`` scope tag is resolved for
   the executor's region and added as a query parameter, as is ``locale``.
3. **Finalises the URL** -- parameters are appended to any query string
   already present on the template.
4. **Probes the cache** -- only in regular mode, without ``ignore_cache``
   and without ``since``. A hit is decoded and returned with no network
   call.
5. **Attaches a bearer token** -- from the shared
   :class:`~bnetapi.auth.token.TokenManager`, unless the caller passed
   ``access_token`` or the config carries a preset ``access_token``.
6. **Dispatches** a GET over a per-call connection, classifies the status,
   writes 200 bodies back to the cache and decodes the payload.

See Also:
    :class:`~bnetapi.cache.ResponseCache` -- the cache consulted in step 4.
    :class:`~bnetapi.transport.Transport` -- the per-call HTTP transport.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Optional, Union

import httpx

from bnetapi.auth.token import TokenManager, get_token_manager
from bnetapi.cache import ResponseCache
from bnetapi.client.response import decode_payload, error_detail
from bnetapi.config import resolve_credential
from bnetapi.exceptions import ApiError, ConfigurationError
from bnetapi.models import (
    Config,
    Game,
    Mode,
    NamespaceScope,
    Region,
    RequestOptions,
    ResolvedRequest,
    Scope,
)
from bnetapi.namespace import base_url, resolve_namespace
from bnetapi.output import debug
from bnetapi.transport import Transport


class RequestExecutor:
    """Execute GET requests against the game-data API.

    Args:
        config: Client configuration. Read-only from here on.
        token_manager: Token source. Defaults to the process-wide manager
            for *config*'s credentials.
        cache: Response cache. Defaults to one built from *config*
            (disabled unless ``config.use_cache``).
        transport: HTTP transport. Defaults to a per-call httpx transport.
        region: API region. Defaults to ``config.region``.
        mode: ``regular`` returns payloads and raises on failure;
            ``extended`` returns ``(response, payload)`` pairs.
        game: Game path segment used by :meth:`base_url`.

    Example::

        executor = RequestExecutor(load_config(), region="eu")
        realms = executor.execute(
            f"{executor.base_url('game_data')}/realm/index",
            namespace="dynamic",
            locale="en_GB",
        )
    """

    def __init__(
        self,
        config: Config,
        token_manager: Optional[TokenManager] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[Transport] = None,
        region: Union[Region, str, None] = None,
        mode: Union[Mode, str] = Mode.REGULAR,
        game: Union[Game, str] = Game.WOW,
    ) -> None:
        self._config = config
        self._tokens = token_manager or get_token_manager(config)
        self._cache = cache if cache is not None else ResponseCache.from_config(config)
        self._transport = transport or Transport.from_config(config)
        try:
            self.region = Region(region) if region is not None else config.region
            self.mode = Mode(mode)
            self.game = Game(game)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from None

    def with_mode(self, mode: Union[Mode, str]) -> RequestExecutor:
        """Return a copy running in *mode* that shares tokens, cache and transport."""
        return RequestExecutor(
            self._config,
            token_manager=self._tokens,
            cache=self._cache,
            transport=self._transport,
            region=self.region,
            mode=mode,
            game=self.game,
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def token_manager(self) -> TokenManager:
        return self._tokens

    # ------------------------------------------------------------------ #
    # URL helpers
    # ------------------------------------------------------------------ #

    def base_url(self, scope: Union[Scope, str]) -> str:
        """Base URL of *scope* for this executor's region and game."""
        return base_url(scope, self.region, self.game, self._config.api_host)

    def endpoint_namespace(
        self, scope: Union[NamespaceScope, str], classic: bool = False
    ) -> str:
        """Namespace string for *scope* in this executor's region."""
        return resolve_namespace(scope, self.region, classic)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def using_cache(self, options: RequestOptions) -> bool:
        """Whether the cache may be consulted for a call with *options*.

        Extended mode and ``since`` always force a live round trip, since
        both must reflect current server state.
        """
        if self.mode is Mode.EXTENDED or options.since is not None:
            return False
        return not options.ignore_cache

    def resolve(self, url: str, **options: Any) -> ResolvedRequest:
        """Build the final URL and caller headers for one call.

        Args:
            url: URL template, optionally already carrying a query string.
            **options: Control options plus API fields.

        Raises:
            ConfigurationError: On invalid control options or namespace.
        """
        request_options, fields = RequestOptions.partition(options)

        params: dict[str, Any] = dict(fields)
        if request_options.namespace is not None:
            params["namespace"] = self.endpoint_namespace(
                request_options.namespace, request_options.classic
            )
        if request_options.locale:
            params["locale"] = request_options.locale
        full_url = _append_query(url, params)

        headers: dict[str, str] = {}
        if request_options.since is not None:
            headers["If-Modified-Since"] = http_date(request_options.since)
        headers.update(request_options.headers)

        return ResolvedRequest(
            url=full_url,
            headers=headers,
            cache_key=full_url,
            options=request_options,
        )

    def execute(self, url: str, **options: Any) -> Any:
        """Execute a GET request.

        Args:
            url: URL template (see :meth:`base_url`).
            **options: Control options (``locale``, ``namespace``,
                ``classic``, ``access_token``, ``ignore_cache``, ``ttl``,
                ``since``, ``headers``, ``format``) plus API fields, which
                become query parameters.

        Returns:
            In regular mode, the decoded payload (``None`` on 304). In
            extended mode, a ``(httpx.Response, payload)`` tuple where the
            payload is ``None`` unless the status is 200.

        Raises:
            ApiError: In regular mode, for any status other than 200/304.
            AuthError: If a token is needed and cannot be obtained.
            TransportError: On connection-level failures.
            DecodeError: If the body does not match the requested format.
            ConfigurationError: On invalid options.
        """
        request = self.resolve(url, **options)
        request_options = request.options
        fmt = request_options.format or self._config.format
        use_cache = self.using_cache(request_options)

        if use_cache:
            cached = self._cache.get(request.cache_key)
            if cached is not None:
                return decode_payload(cached, fmt, request.url)

        response = self._dispatch(request)
        status = response.status_code

        if status not in (200, 304) and self.mode is Mode.REGULAR:
            debug(f"Request failed; url: {request.url}, code: {status}")
            raise ApiError(status, request.url, error_detail(response))

        payload = None
        if status == 200:
            payload = decode_payload(response.content, fmt, request.url)
            if use_cache:
                ttl = request_options.ttl or self._config.default_ttl
                self._cache.set(request.cache_key, response.content, ttl)

        if self.mode is Mode.EXTENDED:
            return response, payload
        return payload

    def _dispatch(self, request: ResolvedRequest) -> httpx.Response:
        token = request.options.access_token or self._preset_token()
        if token is None:
            token = self._tokens.get_valid_token().value
        headers = {"Authorization": f"Bearer {token}", **request.headers}
        return self._transport.send(httpx.Request("GET", request.url, headers=headers))

    def _preset_token(self) -> Optional[str]:
        if not self._config.access_token:
            return None
        return resolve_credential(self._config.access_token)


def http_date(value: datetime) -> str:
    """Format *value* as an RFC 1123 HTTP date. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _append_query(url: str, params: dict[str, Any]) -> str:
    if not params:
        return url
    query = str(httpx.QueryParams(params))
    if url.endswith(("?", "&")):
        return f"{url}{query}"
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"
