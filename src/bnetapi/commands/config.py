"""Config commands -- view and modify the configuration file.

Provides the ``bnetapi config`` sub-command group for reading, updating
and resetting the config file (:class:`~bnetapi.models.Config`).
Environment variables still take precedence over the file at run time.
"""

from __future__ import annotations

import typer

from bnetapi.exit_codes import EXIT_INVALID_USAGE
from bnetapi.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_SECRET_FIELDS = ("client_secret", "access_token")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (file + environment).

    Literal secrets are masked; ``env:`` and ``file:`` sources are shown
    as-is.

    Example::

        bnetapi config show
        bnetapi --json config show
    """
    from bnetapi.config import config_file_path, load_config
    from bnetapi.exceptions import BnetApiError

    try:
        config = load_config()
    except BnetApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    data = config.model_dump(mode="json")
    for field in _SECRET_FIELDS:
        value = data.get(field)
        if value and not value.startswith(("env:", "file:")):
            data[field] = "********"
    info(f"Config file: {config_file_path()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (e.g. 'region', 'use_cache', 'cache_url')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the config file.

    The updated file is validated against :class:`~bnetapi.models.Config`
    before saving.

    Example::

        bnetapi config set client_id env:BNET_CLIENT_ID
        bnetapi config set use_cache true
        bnetapi config set cache_url disk://
    """
    from bnetapi.config import load_config_file, save_config
    from bnetapi.exceptions import BnetApiError
    from bnetapi.models import Config

    if key not in Config.model_fields:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    try:
        data = load_config_file()
    except BnetApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    data[key] = value
    try:
        new_config = Config.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_config(new_config)
    shown = "********" if key in _SECRET_FIELDS and not value.startswith(("env:", "file:")) else value
    success(f"Set {key} = {shown}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the config file to defaults."""
    from bnetapi.config import save_config
    from bnetapi.models import Config

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_config(Config())
    success("Configuration reset to defaults.")
