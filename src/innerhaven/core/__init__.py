from __future__ import annotations

from .dispatcher import InputDispatcher
from .keys import KEY_CTRL_C, EventKind, KeyEvent, terminal_key_events

__all__ = [
    "KEY_CTRL_C",
    "EventKind",
    "InputDispatcher",
    "KeyEvent",
    "terminal_key_events",
]
