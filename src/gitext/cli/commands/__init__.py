"""CLI command modules for gitext.

Single commands are plain functions registered with ``app.command()``;
``start``, ``update``, ``retarget`` and ``prepare`` are sub-apps whose only
subcommand names the kind of branch (or artifact) they act on.
"""

from __future__ import annotations

import typer

from . import prepare, retarget, start, update
from .cleanup import cleanup
from .config_cmd import config
from .status import status
from .sync import sync


def register_commands(app: typer.Typer) -> None:
    """Attach every gitext command to the root app."""
    app.command()(sync)
    app.add_typer(start.app, name="start")
    app.add_typer(update.app, name="update")
    app.add_typer(retarget.app, name="retarget")
    app.command()(cleanup)
    app.command()(status)
    app.add_typer(prepare.app, name="prepare")
    app.command()(config)


__all__ = ["register_commands"]
