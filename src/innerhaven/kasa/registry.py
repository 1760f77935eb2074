from __future__ import annotations

import logging
from collections.abc import Sequence

from innerhaven.config import DeviceConfig
from innerhaven.errors import ConfigurationError, DeviceError

from .connection import exchange as tcp_exchange
from .plug import Exchange, KasaPlug

logger = logging.getLogger(__name__)


def _parse_pair(entry: str) -> tuple[str, int]:
    parts = entry.strip().split(":")
    if len(parts) != 2:
        raise ConfigurationError(
            f"Invalid mapping entry {entry!r}: expected <address>:<key>"
        )

    address, key = (part.strip() for part in parts)
    if not address:
        raise ConfigurationError(f"Invalid mapping entry {entry!r}: empty address")
    try:
        trigger_key = int(key)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid mapping entry {entry!r}: key {key!r} is not an integer"
        ) from exc
    return address, trigger_key


def parse_mapping(
    mapping: str,
    config: DeviceConfig | None = None,
    exchange: Exchange = tcp_exchange,
) -> list[KasaPlug]:
    """Build plugs from ``<address>:<key>,<address>:<key>``.

    Raises ConfigurationError for the first malformed entry; nothing is
    returned in that case.
    """
    pairs = [_parse_pair(entry) for entry in mapping.split(",")]
    return [
        KasaPlug(address, trigger_key, config=config, exchange=exchange)
        for address, trigger_key in pairs
    ]


def initialize(plugs: Sequence[KasaPlug]) -> None:
    """Query every plug once, in order, stopping at the first failure."""
    logger.info("Retrieving information for %d plug(s)", len(plugs))
    for plug in plugs:
        try:
            plug.query_system_info()
        except DeviceError as exc:
            logger.error("Could not query %s: %s", plug.address, exc)
            raise
        logger.info(
            "Found plug: %s, model %s", plug.describe(), plug.model or "unknown"
        )
