"""OAuth client-credentials authentication for bnetapi.

The main entry points are:

- :class:`TokenManager` -- owns the shared access token, refreshing it
  single-flight when it is absent or about to expire.
- :func:`get_token_manager` -- process-wide registry returning one
  manager per credential set.

Typical usage::

    from bnetapi.auth import get_token_manager

    token = get_token_manager(config).get_valid_token()
    headers = {"Authorization": f"Bearer {token.value}"}
"""

from bnetapi.auth.token import (
    DEFAULT_TOKEN_LIFETIME,
    TOKEN_EXPIRY_MARGIN,
    TokenManager,
    get_token_manager,
    reset_token_managers,
)

__all__ = [
    "DEFAULT_TOKEN_LIFETIME",
    "TOKEN_EXPIRY_MARGIN",
    "TokenManager",
    "get_token_manager",
    "reset_token_managers",
]
