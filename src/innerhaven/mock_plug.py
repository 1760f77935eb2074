"""Mock Kasa plug server for development and testing."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from innerhaven.kasa import codec

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

logger = logging.getLogger(__name__)

ERR_MODULE_NOT_SUPPORTED = -1
ERR_METHOD_NOT_SUPPORTED = -2
ERR_INVALID_ARGUMENT = -3


@dataclass
class MockKasaPlug:
    """Mock HS1xx plug answering sysinfo and relay commands.

    Like the real device it handles exactly one request per connection and
    closes the socket after replying.
    """

    alias: str = "Mock Plug"
    model: str = "HS105(US)"
    mac: str = "50:C7:BF:00:00:01"
    device_id: str = "8006MOCKDEVICE0000000000000000000000001"
    software_version: str = "1.5.8 Build 191125 Rel.135255"
    hardware_version: str = "2.0"
    host: str = "0.0.0.0"
    port: int = 9999

    relay_state: int = 0
    requests: list[dict[str, Any]] = field(default_factory=list, repr=False)

    _server: asyncio.Server | None = field(default=None, repr=False)

    @property
    def bound_port(self) -> int:
        """Port actually bound; differs from ``port`` when it was 0."""
        if self._server is None or not self._server.sockets:
            return self.port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Start the mock plug server."""
        self._server = await asyncio.start_server(
            self._handle_client, self.host, self.port
        )
        logger.info(
            "Mock plug '%s' listening on %s:%d", self.alias, self.host, self.bound_port
        )

    async def stop(self) -> None:
        """Stop the mock plug server."""
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            logger.info("Mock plug '%s' stopped", self.alias)

    async def run_forever(self) -> None:
        """Run the server until interrupted."""
        await self.start()
        if self._server:
            await self._server.serve_forever()

    def sysinfo(self) -> dict[str, Any]:
        return {
            "sw_ver": self.software_version,
            "hw_ver": self.hardware_version,
            "model": self.model,
            "deviceId": self.device_id,
            "oemId": "MOCKOEM0000000000000000000000001",
            "hwId": "MOCKHW00000000000000000000000001",
            "rssi": -52,
            "longitude_i": 0,
            "latitude_i": 0,
            "alias": self.alias,
            "mic_type": "IOT.SMARTPLUGSWITCH",
            "feature": "TIM",
            "mac": self.mac,
            "updating": 0,
            "led_off": 0,
            "relay_state": self.relay_state,
            "on_time": 0,
            "active_mode": "none",
            "icon_hash": "",
            "dev_name": "Smart Wi-Fi Plug Mini",
            "next_action": {"type": -1},
            "err_code": 0,
        }

    async def _handle_client(
        self, reader: "StreamReader", writer: "StreamWriter"
    ) -> None:
        """Handle a single request on one connection."""
        addr = writer.get_extra_info("peername")
        logger.debug("Client connected: %s", addr)

        try:
            header = await reader.readexactly(codec.HEADER_SIZE)
            payload = await reader.readexactly(codec.declared_length(header))
            reply = self.handle_request(codec.decode(header + payload))
            writer.write(codec.encode(reply))
            await writer.drain()
        except asyncio.IncompleteReadError:
            logger.debug("Client sent an incomplete frame: %s", addr)
        except (ConnectionResetError, BrokenPipeError):
            logger.debug("Client disconnected: %s", addr)
        finally:
            writer.close()
            await writer.wait_closed()

    def handle_request(self, plaintext: bytes) -> bytes:
        """Apply one decoded JSON request and return the plaintext reply."""
        try:
            request = json.loads(plaintext)
        except ValueError:
            request = None
        if not isinstance(request, dict):
            logger.warning("Ignoring malformed request: %r", plaintext[:64])
            return b""
        self.requests.append(request)

        reply: dict[str, Any] = {}
        for module, methods in request.items():
            if module != "system" or not isinstance(methods, dict):
                reply[module] = {
                    "err_code": ERR_MODULE_NOT_SUPPORTED,
                    "err_msg": "module not support",
                }
                continue
            reply[module] = {
                method: self._handle_system(method, args)
                for method, args in methods.items()
            }
        return json.dumps(reply, separators=(",", ":")).encode()

    def _handle_system(self, method: str, args: Any) -> dict[str, Any]:
        if method == "get_sysinfo":
            return self.sysinfo()

        if method == "set_relay_state":
            state = args.get("state") if isinstance(args, dict) else None
            if state not in (0, 1):
                return {
                    "err_code": ERR_INVALID_ARGUMENT,
                    "err_msg": "invalid argument",
                }
            self.relay_state = state
            logger.info(
                "Relay state of '%s' changed to: %s",
                self.alias,
                "ON" if state else "OFF",
            )
            return {"err_code": 0}

        return {"err_code": ERR_METHOD_NOT_SUPPORTED, "err_msg": "method not support"}


async def run_mock_plug(
    alias: str = "Mock Plug",
    host: str = "0.0.0.0",
    port: int = 9999,
    model: str = "HS105(US)",
    relay_state: int = 0,
) -> None:
    """Run a mock Kasa plug server."""
    plug = MockKasaPlug(
        alias=alias, host=host, port=port, model=model, relay_state=relay_state
    )
    await plug.run_forever()
