from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from innerhaven.mock_plug import run_mock_plug


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        alias: str = typer.Option("Mock Plug", "--alias", "-a", help="Plug alias"),
        host: str = typer.Option("0.0.0.0", "--host", help="Address to bind"),
        port: int = typer.Option(9999, "--port", "-p", help="Port to listen on"),
        model: str = typer.Option("HS105(US)", "--model", help="Model to report"),
        on: bool = typer.Option(False, "--on/--off", help="Initial relay state"),
    ) -> None:
        """Run a mock Kasa plug for development."""
        console = Console()
        console.print(f"Starting mock plug '{alias}' on {host}:{port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(
                run_mock_plug(
                    alias=alias,
                    host=host,
                    port=port,
                    model=model,
                    relay_state=1 if on else 0,
                )
            )
        except KeyboardInterrupt:
            console.print("\n[green]Mock plug stopped.[/green]")
