from __future__ import annotations

import asyncio
import threading

import pytest

from innerhaven.config import get_settings
from innerhaven.mock_plug import MockKasaPlug


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("INNERHAVEN_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_plug():
    """A MockKasaPlug served on an ephemeral localhost port."""
    plug = MockKasaPlug(alias="Desk Lamp", host="127.0.0.1", port=0)
    loop = asyncio.new_event_loop()
    started = threading.Event()

    def _serve() -> None:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(plug.start())
        started.set()
        loop.run_forever()

    thread = threading.Thread(target=_serve, daemon=True)
    thread.start()
    assert started.wait(5), "mock plug did not start"

    yield plug

    asyncio.run_coroutine_threadsafe(plug.stop(), loop).result(5)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(5)
    loop.close()
