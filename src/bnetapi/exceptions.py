"""Exception hierarchy for bnetapi.

All exceptions inherit from :class:`BnetApiError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`bnetapi.exit_codes`.
Library callers catch the specific subclasses; the CLI entry point in
:func:`bnetapi.app.main` catches ``BnetApiError`` and exits with the
appropriate code.

None of these errors are retried internally. They propagate synchronously
to the caller, which owns any retry or backoff policy.

Subclass hierarchy::

    BnetApiError (exit 1)
    +-- ConfigurationError  (exit 1)
    +-- AuthError           (exit 3)
    +-- ApiError            (exit 3 / 4 / 5, by status code)
    +-- TransportError      (exit 6)
    +-- DecodeError         (exit 7)
"""

from __future__ import annotations

from typing import Optional

from bnetapi.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class BnetApiError(Exception):
    """Base exception for all bnetapi errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(BnetApiError):
    """Raised for invalid static configuration (unknown namespace scope, bad credential source)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthError(BnetApiError):
    """Raised when the client-credentials exchange fails or returns an unusable token."""

    exit_code = EXIT_AUTH_FAILURE


class ApiError(BnetApiError):
    """Raised in regular mode when the API answers with a status other than 200 or 304.

    The numeric status is kept on :attr:`status_code` so that callers can
    drive their own retry decisions. The resolved URL is kept on
    :attr:`url`.

    Args:
        status_code: HTTP status returned by the API.
        url: The fully resolved request URL.
        detail: Optional extra text (usually the error body, truncated).
    """

    def __init__(self, status_code: int, url: str, detail: Optional[str] = None):
        message = f"Request failed (API responded with status: {status_code}) for {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, exit_code=_exit_code_for_status(status_code))
        self.status_code = status_code
        self.url = url


class TransportError(BnetApiError):
    """Raised on connection-level failures (DNS, TLS, timeout, connection refused).

    Distinct from :class:`ApiError`: no HTTP status was received.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(BnetApiError):
    """Raised when a response body is not valid JSON but a parsed format was requested."""

    exit_code = EXIT_DECODE_ERROR


def _exit_code_for_status(status_code: int) -> int:
    if status_code in (401, 403):
        return EXIT_AUTH_FAILURE
    if status_code == 404:
        return EXIT_NOT_FOUND
    return EXIT_SERVER_ERROR
