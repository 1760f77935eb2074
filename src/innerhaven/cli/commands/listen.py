from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from innerhaven.cli.helpers import load_settings_or_exit
from innerhaven.core import InputDispatcher, terminal_key_events
from innerhaven.errors import ConfigurationError, DeviceError
from innerhaven.kasa import KasaPlug, initialize, parse_mapping

logger = logging.getLogger(__name__)


def _key_label(key: int | None) -> str:
    if key is None:
        return ""
    if 32 < key < 127:
        return f"{key} ({chr(key)!r})"
    return str(key)


def _print_plugs(console: Console, plugs: list[KasaPlug]) -> None:
    table = Table()
    table.add_column("Key", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Name")
    table.add_column("Model")
    table.add_column("State")

    for plug in plugs:
        table.add_row(
            _key_label(plug.trigger_key),
            plug.address,
            escape(plug.name),
            escape(plug.model),
            "[green]on[/green]" if plug.on else "[dim]off[/dim]",
        )
    console.print(table)


def listen(
    mapping: str = typer.Argument(
        ...,
        help="Plug bindings as <ip>:<key>,<ip>:<key> (key is a character code)",
    ),
) -> None:
    """Toggle plugs when their trigger key is pressed."""
    console = Console()
    settings = load_settings_or_exit()

    try:
        plugs = parse_mapping(mapping, config=settings.device)
    except ConfigurationError as exc:
        console.print(f"[red]Invalid mapping:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    console.print("Retrieving information for plugs; this might take a while")
    try:
        initialize(plugs)
    except DeviceError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    _print_plugs(console, plugs)
    console.print("Press a trigger key to toggle its plug, Ctrl+C to stop.\n")

    with ExitStack() as stack:
        executor = None
        if settings.dispatch.fan_out:
            executor = stack.enter_context(
                ThreadPoolExecutor(
                    max_workers=settings.dispatch.workers,
                    thread_name_prefix="toggle",
                )
            )
        InputDispatcher(plugs, executor=executor).run(terminal_key_events())

    console.print("\n[green]Stopped.[/green]")


def register(app: typer.Typer) -> None:
    app.command()(listen)
