"""Typer application and CLI entry point for bnetapi.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``get``, ``token``, ``cache``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~bnetapi.exceptions.BnetApiError` exits with the error's exit
code; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`bnetapi.config`: configuration resolution used by every command.
    :mod:`bnetapi.output`: output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from bnetapi import __version__
from bnetapi.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="bnetapi",
    help="Query the Battle.net game-data API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"bnetapi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    region: Optional[str] = typer.Option(
        None, "--region", "-r", help="API region (us, eu, kr, tw)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~bnetapi.output.OutputManager` from the
    CLI flags and stores shared options in ``ctx.obj``.
    """
    from bnetapi.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["region"] = region


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from bnetapi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{exc!r}\n\n{traceback.format_exc()}")
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app`. Idempotent."""
    if getattr(app, "_bnetapi_registered", False):
        return
    from bnetapi.commands.cache import cache_app
    from bnetapi.commands.config import config_app
    from bnetapi.commands.get import get_command
    from bnetapi.commands.token import token_app

    app.command("get")(get_command)
    app.add_typer(token_app, name="token", help="Access token management.")
    app.add_typer(cache_app, name="cache", help="Response cache management.")
    app.add_typer(config_app, name="config", help="Configuration management.")
    app._bnetapi_registered = True  # type: ignore[attr-defined]


def main() -> None:
    """CLI entry point invoked by the ``bnetapi`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from bnetapi.exceptions import BnetApiError
        from bnetapi.output import error

        if isinstance(exc, BnetApiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
