"""Error types raised by innerhaven."""

from __future__ import annotations


class InnerhavenError(Exception):
    """Base class for all innerhaven errors."""


class ConfigurationError(InnerhavenError, ValueError):
    """Malformed plug mapping or config file."""


class DeviceError(InnerhavenError):
    """A single command to a plug failed."""

    def __init__(self, address: str, message: str) -> None:
        super().__init__(f"{address}: {message}")
        self.address = address


class DeviceUnreachable(DeviceError):
    """The TCP connection to the plug could not be opened."""


class CommandSendFailed(DeviceError):
    """The framed command could not be written in full."""


class ResponseReadFailed(DeviceError):
    """The response could not be read before the deadline."""


class ProtocolDecodeError(DeviceError):
    """The decoded response is not the expected JSON document."""
