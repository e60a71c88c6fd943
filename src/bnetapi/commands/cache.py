"""Cache commands -- inspect and clear the response cache.

Operates on the backend named by ``cache_url`` in the configuration.
Nothing is touched when ``use_cache`` is off.
"""

from __future__ import annotations

import typer

from bnetapi.commands import fail, load_cli_config
from bnetapi.exceptions import BnetApiError
from bnetapi.output import format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache(ctx: typer.Context):
    from bnetapi.cache import ResponseCache

    try:
        return ResponseCache.from_config(load_cli_config(ctx))
    except BnetApiError as exc:
        fail(exc)


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show whether caching is enabled, the backend in use and its size."""
    cache = _open_cache(ctx)
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Remove every cached response."""
    cache = _open_cache(ctx)
    try:
        if not cache.enabled:
            info("Caching is disabled; nothing to clear.")
            return
        if not force and not typer.confirm("Remove all cached responses?"):
            info("Cancelled.")
            raise typer.Exit()
        cache.clear()
        success("Cache cleared.")
    finally:
        cache.close()


@cache_app.command("invalidate")
def cache_invalidate(
    ctx: typer.Context,
    url: str = typer.Argument(help="Fully resolved request URL, query string included."),
) -> None:
    """Remove the cached response for one URL."""
    cache = _open_cache(ctx)
    try:
        cache.invalidate(url)
        success(f"Invalidated {url}")
    finally:
        cache.close()
