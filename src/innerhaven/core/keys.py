from __future__ import annotations

import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import typer

KEY_CTRL_C = 3
ESCAPE = "\x1b"


class EventKind(enum.Enum):
    KEY = "key"
    INTERRUPT = "interrupt"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    kind: EventKind
    key: int | None = None

    @classmethod
    def pressed(cls, key: int) -> KeyEvent:
        return cls(EventKind.KEY, key)

    @property
    def is_termination(self) -> bool:
        return self.kind is EventKind.INTERRUPT or (
            self.kind is EventKind.KEY and self.key == KEY_CTRL_C
        )


def terminal_key_events(
    getchar: Callable[[], str] = typer.getchar,
) -> Iterator[KeyEvent]:
    """Yield one event per keypress read from the terminal.

    Printable input becomes one KEY event per character, so keys typed faster
    than they are read still arrive in order. Escape sequences (arrows,
    function keys) become a single OTHER. Ctrl+C, Ctrl+D or an exhausted input
    yields a final INTERRUPT event.
    """
    while True:
        try:
            chars = getchar()
        except (KeyboardInterrupt, EOFError):
            yield KeyEvent(EventKind.INTERRUPT)
            return

        if not chars:
            yield KeyEvent(EventKind.INTERRUPT)
            return
        if len(chars) > 1 and chars.startswith(ESCAPE):
            yield KeyEvent(EventKind.OTHER)
            continue
        for char in chars:
            event = KeyEvent.pressed(ord(char))
            yield event
            if event.is_termination:
                return
