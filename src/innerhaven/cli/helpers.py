from __future__ import annotations

from pathlib import Path

import typer

from innerhaven.config import Settings, get_settings, resolve_config_path
from innerhaven.kasa import KasaPlug


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_plug(host: str, settings: Settings, port: int | None = None) -> KasaPlug:
    config = settings.device
    if port is not None:
        config = config.model_copy(update={"port": port})
    return KasaPlug(host, config=config)
