"""Namespace and base-URL resolution.

Pure functions that turn ``(scope, region, flags)`` tuples into the strings
the API expects. Nothing here performs I/O.
"""

from __future__ import annotations

from typing import Union

from bnetapi.exceptions import ConfigurationError
from bnetapi.models import Game, NamespaceScope, Region, Scope

BASE_URLS: dict[Scope, str] = {
    Scope.GAME_DATA: "https://{region}.{host}/data/{game}",
    Scope.COMMUNITY: "https://{region}.{host}/{game}",
    Scope.PROFILE: "https://{region}.{host}/profile/{game}",
    Scope.MEDIA: "https://{region}.{host}/data/{game}/media",
    Scope.USER_PROFILE: "https://{region}.{host}/profile/user/{game}",
    Scope.SEARCH: "https://{region}.{host}/data/{game}/search",
}


def resolve_namespace(
    scope: Union[NamespaceScope, str],
    region: Union[Region, str],
    classic: bool = False,
) -> str:
    """Return the namespace string for *scope* in *region*.

    ``dynamic`` and ``static`` gain a ``-classic`` infix when *classic* is
    set. ``profile`` ignores the flag.

    Example::

        >>> resolve_namespace("dynamic", "eu")
        'dynamic-eu'
        >>> resolve_namespace(NamespaceScope.STATIC, Region.US, classic=True)
        'static-classic-us'

    Raises:
        ConfigurationError: If *scope* is not a known namespace scope.
    """
    scope = _coerce(NamespaceScope, scope, "namespace scope")
    region_code = _coerce(Region, region, "region").value

    if scope is NamespaceScope.PROFILE:
        return f"profile-{region_code}"
    if classic:
        return f"{scope.value}-classic-{region_code}"
    return f"{scope.value}-{region_code}"


def base_url(
    scope: Union[Scope, str],
    region: Union[Region, str],
    game: Union[Game, str],
    host: str = "api.blizzard.com",
) -> str:
    """Format the base URL of an API *scope* for *game* in *region*.

    Raises:
        ConfigurationError: If *scope*, *region* or *game* is unknown.
    """
    scope = _coerce(Scope, scope, "scope")
    return BASE_URLS[scope].format(
        region=_coerce(Region, region, "region").value,
        host=host,
        game=_coerce(Game, game, "game").value,
    )


def parse_battle_tag(battletag: str) -> str:
    """Convert a battletag (``Name#1234``) to its URL form (``Name-1234``)."""
    return battletag.replace("#", "-", 1)


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid {label} '{value}'. Expected one of: {valid}"
        ) from None
