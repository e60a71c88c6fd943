"""Token commands -- inspect and refresh the client-credentials token.

The token lives in memory only, so each invocation performs at most one
exchange with the token endpoint.
"""

from __future__ import annotations

import typer

from bnetapi.commands import fail, load_cli_config
from bnetapi.exceptions import BnetApiError
from bnetapi.output import format_response


token_app = typer.Typer(no_args_is_help=True)


@token_app.command("show")
def token_show(
    ctx: typer.Context,
    reveal: bool = typer.Option(False, "--reveal", help="Print the token value."),
) -> None:
    """Obtain an access token and print its expiry.

    Example::

        bnetapi token show
        bnetapi --region eu token show --reveal
    """
    from bnetapi.auth import get_token_manager

    try:
        manager = get_token_manager(load_cli_config(ctx))
        token = manager.get_valid_token()
    except BnetApiError as exc:
        fail(exc)

    data = {
        "token_url": manager.token_url,
        "expires_at": token.expires_at.isoformat(),
    }
    if reveal:
        data["access_token"] = token.value
    format_response(data)
