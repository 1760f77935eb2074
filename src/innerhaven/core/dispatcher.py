from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, Future

from innerhaven.errors import DeviceError
from innerhaven.kasa import KasaPlug

from .keys import EventKind, KeyEvent

logger = logging.getLogger(__name__)


class InputDispatcher:
    """Route key events to the plugs bound to them.

    Without an executor every toggle runs inline, so the loop waits for the
    network round-trip before reading the next key. With an executor toggles
    are submitted to it and the per-plug lock serializes commands per plug.
    """

    def __init__(
        self, plugs: Sequence[KasaPlug], executor: Executor | None = None
    ) -> None:
        self._plugs = list(plugs)
        self._executor = executor

    def matching(self, key: int) -> list[KasaPlug]:
        return [plug for plug in self._plugs if plug.trigger_key == key]

    def handle(self, event: KeyEvent) -> bool:
        """Process one event. Returns False when the loop should stop."""
        if event.is_termination:
            logger.info("Interrupt received, stopping")
            return False
        if event.kind is not EventKind.KEY or event.key is None:
            return True

        for plug in self.matching(event.key):
            if self._executor is None:
                self._toggle(plug)
            else:
                future = self._executor.submit(plug.toggle)
                future.add_done_callback(
                    lambda done, plug=plug: self._report(plug, done)
                )
        return True

    def run(self, events: Iterable[KeyEvent]) -> None:
        logger.info("Listening for input")
        for event in events:
            if not self.handle(event):
                break

    def _toggle(self, plug: KasaPlug) -> None:
        try:
            plug.toggle()
        except DeviceError as exc:
            logger.error("Could not toggle %s: %s", plug.describe(), exc)

    def _report(self, plug: KasaPlug, future: Future[bool]) -> None:
        exc = future.exception()
        if isinstance(exc, DeviceError):
            logger.error("Could not toggle %s: %s", plug.describe(), exc)
        elif exc is not None:
            logger.error(
                "Unexpected error toggling %s", plug.describe(), exc_info=exc
            )
