"""HTTP transport: one request, one freshly created connection.

:class:`Transport` is the only place that talks to :mod:`httpx`. Each call
to :meth:`Transport.send` opens its own :class:`httpx.Client`, sends a
single request, reads the body and closes the client again. No connection
is shared between calls, so concurrent callers never block or corrupt each
other at the transport layer.

Connection-level failures are translated into
:class:`~bnetapi.exceptions.TransportError`; HTTP statuses are left for the
caller to classify.
"""

from __future__ import annotations

from typing import Optional

import httpx

from bnetapi.exceptions import TransportError
from bnetapi.models import Config
from bnetapi.output import debug


class Transport:
    """Send single requests over per-call connections.

    Args:
        timeout: Per-request timeout in seconds (``None`` disables it).
        verify: Verify TLS certificates.
        transport: Optional :class:`httpx.BaseTransport` handed to every
            client; tests pass an :class:`httpx.MockTransport` here.
    """

    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        verify: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

    @classmethod
    def from_config(
        cls, config: Config, transport: Optional[httpx.BaseTransport] = None
    ) -> Transport:
        return cls(timeout=config.timeout, verify=config.verify_ssl, transport=transport)

    def send(self, request: httpx.Request, auth: Optional[httpx.Auth] = None) -> httpx.Response:
        """Send *request* and return the fully read response.

        Raises:
            TransportError: On DNS, TLS, timeout or connection failures.
        """
        debug(f"{request.method} {request.url}")
        with httpx.Client(
            timeout=self._timeout,
            verify=self._verify,
            transport=self._transport,
        ) as client:
            try:
                return client.send(request, auth=auth)
            except httpx.TransportError as exc:
                raise TransportError(
                    f"{request.method} {request.url} failed: {exc}"
                ) from exc
