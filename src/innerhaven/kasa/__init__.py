from __future__ import annotations

from .codec import decode, encode
from .connection import DEFAULT_PORT, exchange
from .plug import KasaPlug
from .registry import initialize, parse_mapping

__all__ = [
    "DEFAULT_PORT",
    "KasaPlug",
    "decode",
    "encode",
    "exchange",
    "initialize",
    "parse_mapping",
]
