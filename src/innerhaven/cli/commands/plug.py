from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from innerhaven.cli.helpers import build_plug, load_settings_or_exit
from innerhaven.errors import DeviceError
from innerhaven.models import SystemInfo
from innerhaven.utils.redaction import Redactor


def _sysinfo_table(host: str, info: SystemInfo, redactor: Redactor) -> Table:
    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    rows = [
        ("Address", redactor.redact_ip(host)),
        ("Alias", info.alias),
        ("Model", info.model),
        ("Relay", "on" if info.is_on else "off"),
        ("On time", f"{info.on_time}s"),
        ("LED", "off" if info.led_off else "on"),
        ("Software", info.software_version),
        ("Hardware", info.hardware_version),
        ("MAC", redactor.redact_mac(info.mac)),
        ("Device ID", redactor.redact_id(info.device_id)),
        ("Hardware ID", redactor.redact_id(info.hardware_id)),
        ("OEM ID", redactor.redact_id(info.oem_id)),
        ("RSSI", f"{info.rssi:g} dBm"),
        ("Mode", info.active_mode),
    ]
    for field, value in rows:
        table.add_row(field, escape(value))
    return table


def sysinfo(
    host: str = typer.Argument(..., help="Plug hostname or IP address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Override port"),
    redact: bool = typer.Option(
        False,
        "--redact",
        help="Redact addresses and device identifiers in output",
    ),
) -> None:
    """Show the system information reported by a plug."""
    console = Console()
    plug = build_plug(host, load_settings_or_exit(), port)

    try:
        info = plug.query_system_info()
    except DeviceError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    console.print(_sysinfo_table(host, info, Redactor(enabled=redact)))


def _set_relay(host: str, port: int | None, on: bool) -> None:
    console = Console()
    plug = build_plug(host, load_settings_or_exit(), port)

    try:
        if on:
            plug.turn_on()
        else:
            plug.turn_off()
    except DeviceError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Turned {'on' if on else 'off'} {host}")


def turn_on(
    host: str = typer.Argument(..., help="Plug hostname or IP address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Override port"),
) -> None:
    """Switch a plug's relay on."""
    _set_relay(host, port, on=True)


def turn_off(
    host: str = typer.Argument(..., help="Plug hostname or IP address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Override port"),
) -> None:
    """Switch a plug's relay off."""
    _set_relay(host, port, on=False)


def register(app: typer.Typer) -> None:
    app.command()(sysinfo)
    app.command("on")(turn_on)
    app.command("off")(turn_off)
