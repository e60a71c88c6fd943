"""The ``get`` command -- one API call from the command line.

Builds a :class:`~bnetapi.client.executor.RequestExecutor` from the
resolved configuration and prints the decoded payload to stdout. Paths
that are not full URLs are appended to the base URL of ``--scope``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import typer

from bnetapi.commands import fail, load_cli_config
from bnetapi.exit_codes import EXIT_INVALID_USAGE
from bnetapi.exceptions import BnetApiError
from bnetapi.output import error, format_response, info


def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(
        help="Full URL, or a path relative to the scope's base URL (e.g. 'realm/index')."
    ),
    scope: str = typer.Option(
        "game_data", "--scope", "-s",
        help="API scope: game_data, community, profile, media, user_profile, search.",
    ),
    game: str = typer.Option("wow", "--game", "-g", help="Game: wow, d3, hearthstone, sc2."),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Namespace scope: dynamic, static, profile."
    ),
    classic: bool = typer.Option(False, "--classic", help="Use the classic namespace."),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Response locale."),
    ignore_cache: bool = typer.Option(False, "--ignore-cache", help="Skip the cache lookup."),
    ttl: Optional[int] = typer.Option(None, "--ttl", help="Cache TTL in seconds."),
    since: Optional[datetime] = typer.Option(
        None, "--since", help="Send If-Modified-Since (UTC); bypasses the cache."
    ),
    access_token: Optional[str] = typer.Option(
        None, "--access-token", help="Use this bearer token instead of client credentials."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="API query field as 'key=value'. Repeatable."
    ),
    extended: bool = typer.Option(
        False, "--extended", "-x", help="Show the HTTP status and never raise on errors."
    ),
) -> None:
    """Fetch an API resource and print the decoded payload.

    Example::

        bnetapi get realm/index --namespace dynamic --locale en_US
        bnetapi --region eu get realm/index -n dynamic --classic
        bnetapi get https://us.api.blizzard.com/data/wow/token/index -n dynamic -x
    """
    from bnetapi.client import RequestExecutor

    try:
        headers = _parse_pairs(header or [], ":", "header")
        fields: dict[str, Any] = _parse_pairs(param or [], "=", "param")
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    try:
        executor = RequestExecutor(
            load_cli_config(ctx),
            mode="extended" if extended else "regular",
            game=game,
        )
    except BnetApiError as exc:
        fail(exc)

    try:
        if not url.startswith(("http://", "https://")):
            url = f"{executor.base_url(scope)}/{url.lstrip('/')}"

        result = executor.execute(
            url,
            namespace=namespace,
            classic=classic,
            locale=locale,
            ignore_cache=ignore_cache,
            ttl=ttl,
            since=since,
            access_token=access_token,
            headers=headers,
            **fields,
        )
    except BnetApiError as exc:
        fail(exc)
    finally:
        executor.cache.close()

    if extended:
        response, payload = result
        info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
        if payload is not None:
            format_response(payload)
        elif response.status_code != 304 and response.content:
            format_response(response.text)
        return

    if result is None:
        info("Not modified.")
        return
    format_response(result)


def _parse_pairs(items: list[str], separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition(separator)
        if not sep or not key.strip():
            raise ValueError(f"Invalid {label} '{item}'. Expected 'name{separator}value'.")
        pairs[key.strip()] = value.strip()
    return pairs
