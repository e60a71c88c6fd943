"""Built-in CLI commands for bnetapi.

Each module exposes a Typer app or command function that
:func:`bnetapi.app.register_commands` attaches to the root application.
The helpers below are shared by all of them.
"""

from __future__ import annotations

from typing import NoReturn, Optional

import typer

from bnetapi.exceptions import BnetApiError
from bnetapi.models import Config


def load_cli_config(ctx: Optional[typer.Context]) -> Config:
    """Resolve configuration, applying the global ``--region`` flag."""
    from bnetapi.config import load_config

    region = ctx.obj.get("region") if ctx is not None and ctx.obj else None
    return load_config(region=region)


def fail(exc: BnetApiError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    from bnetapi.output import error

    error(str(exc))
    raise typer.Exit(code=exc.exit_code)
