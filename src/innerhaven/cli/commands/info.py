from __future__ import annotations

from importlib.metadata import version as get_version

import typer
from rich.console import Console

from innerhaven.cli.helpers import load_settings_or_exit, resolve_config_path_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show version and effective settings."""
        settings = load_settings_or_exit()
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]innerhaven Info[/bold]\n")
        console.print(f"Version: {get_version('innerhaven')}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Device[/bold]")
        console.print(f"Port: {settings.device.port}")
        console.print(f"Timeout: {settings.device.timeout}s")
        console.print(f"Command interval: {settings.device.command_interval}s")
        console.print(f"Max response: {settings.device.max_response_bytes} bytes")

        console.print("\n[bold]Dispatch[/bold]")
        mode = "fan-out" if settings.dispatch.fan_out else "inline"
        console.print(f"Mode: {mode}")
        if settings.dispatch.fan_out:
            console.print(f"Workers: {settings.dispatch.workers}")
