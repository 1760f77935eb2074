"""innerhaven - toggle Kasa smart plugs from keypresses over the local protocol."""

from __future__ import annotations

from importlib.metadata import version

from .config import DeviceConfig, DispatchConfig, Settings, get_settings
from .core import InputDispatcher, KeyEvent
from .errors import (
    CommandSendFailed,
    ConfigurationError,
    DeviceError,
    DeviceUnreachable,
    InnerhavenError,
    ProtocolDecodeError,
    ResponseReadFailed,
)
from .kasa import KasaPlug, initialize, parse_mapping
from .models import SystemInfo

__all__ = [
    "CommandSendFailed",
    "ConfigurationError",
    "DeviceConfig",
    "DeviceError",
    "DeviceUnreachable",
    "DispatchConfig",
    "InnerhavenError",
    "InputDispatcher",
    "KasaPlug",
    "KeyEvent",
    "ProtocolDecodeError",
    "ResponseReadFailed",
    "Settings",
    "SystemInfo",
    "__version__",
    "get_settings",
    "initialize",
    "parse_mapping",
]

__version__ = version("innerhaven")
