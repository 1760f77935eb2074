from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from innerhaven.errors import ConfigurationError

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "INNERHAVEN_CONFIG"


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    port: int = Field(default=9999, ge=1, le=65535)
    timeout: float = Field(default=5.0, gt=0)
    command_interval: float = Field(default=0.5, ge=0)
    max_response_bytes: int = Field(default=64 * 1024, ge=1)


class DispatchConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    fan_out: bool = False
    workers: int = Field(default=4, ge=1, le=64)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def render_settings_toml(settings: Settings) -> str:
    device = settings.device
    dispatch = settings.dispatch
    lines = [
        "# innerhaven configuration",
        "",
        "[device]",
        f"port = {device.port}",
        f"timeout = {device.timeout}",
        f"command_interval = {device.command_interval}",
        f"max_response_bytes = {device.max_response_bytes}",
        "",
        "[dispatch]",
        f"fan_out = {'true' if dispatch.fan_out else 'false'}",
        f"workers = {dispatch.workers}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
