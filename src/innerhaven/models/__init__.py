"""Data models for innerhaven."""

from innerhaven.models.sysinfo import SysinfoCommand, SysinfoResponse, SystemInfo

__all__ = [
    "SysinfoCommand",
    "SysinfoResponse",
    "SystemInfo",
]
