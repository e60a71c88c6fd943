"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~bnetapi.exceptions.BnetApiError` subclass.
Shell wrappers can inspect the exit code of ``bnetapi`` to determine the
failure class without parsing stderr.

Example::

    $ bnetapi get /data/wow/realm/index --namespace dynamic
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- client credentials were rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration errors)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Token exchange failed, or the API answered 401/403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API answered with a status other than 200, 304, 401, 403 or 404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response body could not be decoded in the requested format."""
