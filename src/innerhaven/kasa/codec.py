"""Autokey XOR cipher used by Kasa HS1xx plugs.

Each frame is a 4-byte big-endian length followed by the ciphertext. The key
starts at 171 and every ciphertext byte becomes the key for the next byte,
so the same rule decrypts what it encrypts.
"""

from __future__ import annotations

import struct

INITIAL_KEY = 171
HEADER_SIZE = 4

_HEADER = struct.Struct(">I")


def encode(plaintext: bytes) -> bytes:
    key = INITIAL_KEY
    result = bytearray(_HEADER.pack(len(plaintext)))
    for byte in plaintext:
        key ^= byte
        result.append(key)
    return bytes(result)


def decode(framed: bytes) -> bytes:
    # the length header is not checked here
    key = INITIAL_KEY
    result = bytearray()
    for byte in framed[HEADER_SIZE:]:
        result.append(key ^ byte)
        key = byte
    return bytes(result)


def declared_length(header: bytes) -> int:
    """Return the payload length announced by a 4-byte frame header."""
    return _HEADER.unpack(header[:HEADER_SIZE])[0]
