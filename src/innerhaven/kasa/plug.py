from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from innerhaven.config import DeviceConfig
from innerhaven.errors import ProtocolDecodeError
from innerhaven.models import SysinfoResponse, SystemInfo

from . import codec, commands
from .connection import exchange as tcp_exchange

logger = logging.getLogger(__name__)

Exchange = Callable[..., bytes]

TOGGLE_TIME_FORMAT = "%m-%d %H:%M:%S"


class KasaPlug:
    """One smart plug and its locally cached state.

    Every command takes the plug's own lock for its whole duration and keeps
    ``command_interval`` seconds between consecutive commands. ``on`` is
    updated optimistically and is never confirmed against the device after a
    relay change.
    """

    def __init__(
        self,
        address: str,
        trigger_key: int | None = None,
        config: DeviceConfig | None = None,
        exchange: Exchange = tcp_exchange,
    ) -> None:
        self._address = address
        self._trigger_key = trigger_key
        self._config = config or DeviceConfig()
        self._exchange = exchange
        self._lock = threading.RLock()

        self.name = ""
        self.model = ""
        self.on = False
        self.last_command_at: float | None = None

    @property
    def address(self) -> str:
        return self._address

    @property
    def trigger_key(self) -> int | None:
        return self._trigger_key

    def describe(self) -> str:
        if self.name:
            return f"{self.name} ({self._address})"
        return self._address

    def __repr__(self) -> str:
        return (
            f"KasaPlug(address={self._address!r}, trigger_key={self._trigger_key!r}, "
            f"name={self.name!r}, on={self.on!r})"
        )

    def query_system_info(self) -> SystemInfo:
        raw = self._send(commands.GET_SYSINFO)
        try:
            info = SysinfoResponse.model_validate_json(raw).system.get_sysinfo
        except ValidationError as exc:
            raise ProtocolDecodeError(
                self._address, f"unexpected sysinfo response: {exc}"
            ) from exc

        with self._lock:
            self.name = info.alias
            self.model = info.model
            self.on = info.is_on
        return info

    def turn_on(self) -> None:
        with self._lock:
            self._send(commands.SET_RELAY_ON)
            self.on = True

    def turn_off(self) -> None:
        with self._lock:
            self._send(commands.SET_RELAY_OFF)
            self.on = False

    def toggle(self) -> bool:
        """Flip the relay and return the new cached state.

        The cached state is flipped even when the command fails; the error is
        re-raised after the flip.
        """
        with self._lock:
            target = not self.on
            try:
                if target:
                    self.turn_on()
                else:
                    self.turn_off()
            finally:
                self.on = target
                logger.info(
                    "Toggled: %s %s",
                    self.describe(),
                    datetime.now().strftime(TOGGLE_TIME_FORMAT),
                )
        return target

    def _send(self, command: bytes) -> bytes:
        with self._lock:
            try:
                self._wait_for_interval()
                logger.debug("Sending %s to %s", command.decode(), self.describe())
                response = self._exchange(
                    self._address,
                    codec.encode(command),
                    port=self._config.port,
                    timeout=self._config.timeout,
                    max_response_bytes=self._config.max_response_bytes,
                )
            finally:
                self.last_command_at = time.monotonic()
        return codec.decode(response)

    def _wait_for_interval(self) -> None:
        if self.last_command_at is None:
            return
        elapsed = time.monotonic() - self.last_command_at
        remaining = self._config.command_interval - elapsed
        if remaining > 0:
            logger.debug(
                "Waiting %.3fs before next command to %s", remaining, self._address
            )
            time.sleep(remaining)
