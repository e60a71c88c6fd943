"""bnetapi -- a Battle.net game-data API client.

The package is the request-execution layer of the client: OAuth
client-credentials token management, a TTL response cache in front of
every outbound call, namespace and base-URL resolution, and the policy
deciding when the cache may be consulted.

Typical usage::

    from bnetapi import RequestExecutor, load_config

    executor = RequestExecutor(load_config())
    realm = executor.execute(
        f"{executor.base_url('game_data')}/realm/tichondrius",
        namespace="dynamic",
        locale="en_US",
    )

A small Typer CLI (``bnetapi get``, ``bnetapi token``, ``bnetapi cache``,
``bnetapi config``) is installed as a console script.

Modules:
    models: Pydantic models and enumerations shared across the package.
    config: XDG-aware configuration loading and credential resolution.
    namespace: Namespace and base-URL resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr output and debug diagnostics.
    transport: Per-call HTTP transport.
"""

__version__ = "0.1.0"

from bnetapi.auth import TokenManager, get_token_manager  # noqa: E402
from bnetapi.cache import ResponseCache  # noqa: E402
from bnetapi.client import RequestExecutor  # noqa: E402
from bnetapi.config import load_config  # noqa: E402
from bnetapi.exceptions import (  # noqa: E402
    ApiError,
    AuthError,
    BnetApiError,
    ConfigurationError,
    DecodeError,
    TransportError,
)
from bnetapi.models import Config, Mode, Region, ResponseFormat  # noqa: E402
from bnetapi.namespace import resolve_namespace  # noqa: E402

__all__ = [
    "ApiError",
    "AuthError",
    "BnetApiError",
    "Config",
    "ConfigurationError",
    "DecodeError",
    "Mode",
    "Region",
    "RequestExecutor",
    "ResponseCache",
    "ResponseFormat",
    "TokenManager",
    "TransportError",
    "get_token_manager",
    "load_config",
    "resolve_namespace",
]
