from __future__ import annotations

from typing import Annotated

import typer

from innerhaven.utils.logging import LOG_LEVELS, setup_logging

from . import config as config_cmd
from .commands.info import register as register_info
from .commands.listen import register as register_listen
from .commands.mock import register as register_mock
from .commands.plug import register as register_plug

app = typer.Typer(
    help="innerhaven - toggle Kasa smart plugs from your keyboard",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_listen(app)
register_plug(app)
register_info(app)
register_mock(app)


def _check_log_level(value: str | None) -> str | None:
    if value is not None and value.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"choose from {', '.join(LOG_LEVELS).lower()}")
    return value


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Console log level (overrides LOGLEVEL)",
            callback=_check_log_level,
        ),
    ] = None,
) -> None:
    """innerhaven CLI."""
    setup_logging(log_level)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"innerhaven version {get_version('innerhaven')}")
        raise typer.Exit()
