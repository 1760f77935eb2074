from __future__ import annotations

import logging
import socket
import time

from innerhaven.errors import CommandSendFailed, DeviceUnreachable, ResponseReadFailed

from .codec import HEADER_SIZE, declared_length

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9999
DEFAULT_TIMEOUT = 5.0
MAX_RESPONSE_BYTES = 64 * 1024


class _Deadline:
    def __init__(self, timeout: float) -> None:
        self._expires_at = time.monotonic() + timeout

    def remaining(self) -> float:
        left = self._expires_at - time.monotonic()
        if left <= 0:
            raise TimeoutError("deadline exceeded")
        return left


def _recv_exact(sock: socket.socket, size: int, deadline: _Deadline) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        sock.settimeout(deadline.remaining())
        chunk = sock.recv(size - len(buffer))
        if not chunk:
            raise EOFError(f"connection closed after {len(buffer)} of {size} bytes")
        buffer.extend(chunk)
    return bytes(buffer)


def exchange(
    address: str,
    request: bytes,
    *,
    port: int = DEFAULT_PORT,
    timeout: float = DEFAULT_TIMEOUT,
    max_response_bytes: int = MAX_RESPONSE_BYTES,
) -> bytes:
    """Send one framed request and return the framed response.

    A new connection is opened for every call and closed before returning.
    The whole exchange shares a single deadline of ``timeout`` seconds that
    starts once the connection is established.
    """
    logger.debug("Connecting to %s:%d", address, port)
    try:
        sock = socket.create_connection((address, port), timeout=timeout)
    except (OSError, UnicodeError) as exc:
        # UnicodeError: hostname rejected by the IDNA codec before any lookup
        raise DeviceUnreachable(address, f"cannot connect: {exc}") from exc

    with sock:
        deadline = _Deadline(timeout)

        try:
            sock.settimeout(deadline.remaining())
            sock.sendall(request)
        except OSError as exc:
            raise CommandSendFailed(address, f"writing command: {exc}") from exc

        try:
            header = _recv_exact(sock, HEADER_SIZE, deadline)
            length = declared_length(header)
            if length > max_response_bytes:
                raise ResponseReadFailed(
                    address,
                    f"response of {length} bytes exceeds limit of "
                    f"{max_response_bytes}",
                )
            payload = _recv_exact(sock, length, deadline)
        except (OSError, EOFError) as exc:
            raise ResponseReadFailed(address, f"reading response: {exc}") from exc

    logger.debug("Received %d bytes from %s", len(payload), address)
    return header + payload
