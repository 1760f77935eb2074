"""Tests for KasaPlug command handling."""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from dataclasses import dataclass

import pytest

from innerhaven.config import DeviceConfig
from innerhaven.errors import DeviceUnreachable, ProtocolDecodeError
from innerhaven.kasa import KasaPlug, codec
from innerhaven.kasa.commands import GET_SYSINFO, SET_RELAY_OFF, SET_RELAY_ON

RELAY_OK = b'{"system":{"set_relay_state":{"err_code":0}}}'


def sysinfo_reply(alias: str = "Desk Lamp", relay_state: int = 0) -> bytes:
    body = {
        "system": {
            "get_sysinfo": {
                "alias": alias,
                "model": "HS100(US)",
                "relay_state": relay_state,
                "sw_ver": "1.2.5 Build 171213 Rel.101523",
                "mac": "50:C7:BF:01:02:03",
                "deviceId": "8006ABCDEF",
                "rssi": -60,
                "longitude_i": -1223,
            }
        }
    }
    return json.dumps(body).encode()


@dataclass
class Call:
    address: str
    command: bytes
    started: float
    finished: float


class RecordingExchange:
    """Stands in for the TCP exchange and records every framed request."""

    def __init__(
        self,
        reply: bytes = RELAY_OK,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[Call] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, address: str, request: bytes, **kwargs) -> bytes:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        started = time.monotonic()
        time.sleep(self.delay)
        with self._lock:
            self.active -= 1
            self.calls.append(
                Call(address, codec.decode(request), started, time.monotonic())
            )
        if self.error is not None:
            raise self.error
        return codec.encode(self.reply)

    @property
    def commands(self) -> list[bytes]:
        return [call.command for call in self.calls]


def make_plug(exchange: RecordingExchange, interval: float = 0.0) -> KasaPlug:
    return KasaPlug(
        "10.0.0.5",
        49,
        config=DeviceConfig(command_interval=interval),
        exchange=exchange,
    )


def test_query_system_info_populates_plug():
    fake = RecordingExchange(reply=sysinfo_reply(relay_state=1))
    plug = make_plug(fake)

    info = plug.query_system_info()

    assert fake.commands == [GET_SYSINFO]
    assert info.software_version == "1.2.5 Build 171213 Rel.101523"
    assert info.rssi == -60
    assert plug.name == "Desk Lamp"
    assert plug.model == "HS100(US)"
    assert plug.on is True
    assert plug.describe() == "Desk Lamp (10.0.0.5)"


def test_query_system_info_rejects_garbage():
    plug = make_plug(RecordingExchange(reply=b"not json"))

    with pytest.raises(ProtocolDecodeError):
        plug.query_system_info()
    assert plug.name == ""


def test_query_system_info_rejects_wrong_envelope():
    plug = make_plug(RecordingExchange(reply=b'{"system":{"reboot":{}}}'))

    with pytest.raises(ProtocolDecodeError):
        plug.query_system_info()


def test_exchange_receives_device_settings():
    seen: dict[str, object] = {}

    def fake(address: str, request: bytes, **kwargs) -> bytes:
        seen.update(kwargs, address=address)
        return codec.encode(RELAY_OK)

    config = DeviceConfig(port=10999, timeout=2.5, max_response_bytes=4096)
    KasaPlug("10.0.0.9", 50, config=config, exchange=fake).turn_on()

    assert seen == {
        "address": "10.0.0.9",
        "port": 10999,
        "timeout": 2.5,
        "max_response_bytes": 4096,
    }


def test_toggle_logs_timestamped_event(caplog):
    plug = make_plug(RecordingExchange(reply=sysinfo_reply()))
    plug.query_system_info()

    with caplog.at_level(logging.INFO, logger="innerhaven.kasa.plug"):
        plug.toggle()

    [record] = [r for r in caplog.records if r.getMessage().startswith("Toggled:")]
    assert re.fullmatch(
        r"Toggled: Desk Lamp \(10\.0\.0\.5\) \d\d-\d\d \d\d:\d\d:\d\d",
        record.getMessage(),
    )


def test_turn_on_and_off_update_state():
    fake = RecordingExchange()
    plug = make_plug(fake)

    plug.turn_on()
    assert plug.on is True
    plug.turn_off()
    assert plug.on is False
    assert fake.commands == [SET_RELAY_ON, SET_RELAY_OFF]


def test_turn_on_failure_keeps_state():
    plug = make_plug(RecordingExchange(error=DeviceUnreachable("10.0.0.5", "down")))

    with pytest.raises(DeviceUnreachable):
        plug.turn_on()
    assert plug.on is False


def test_toggle_from_off_turns_on():
    fake = RecordingExchange()
    plug = make_plug(fake)

    assert plug.toggle() is True
    assert plug.on is True
    assert fake.commands == [SET_RELAY_ON]


def test_toggle_from_on_turns_off():
    fake = RecordingExchange()
    plug = make_plug(fake)
    plug.on = True

    assert plug.toggle() is False
    assert plug.on is False
    assert fake.commands == [SET_RELAY_OFF]


@pytest.mark.parametrize(
    ("initial", "command"), [(False, SET_RELAY_ON), (True, SET_RELAY_OFF)]
)
def test_toggle_flips_state_even_when_command_fails(initial, command):
    fake = RecordingExchange(error=DeviceUnreachable("10.0.0.5", "down"))
    plug = make_plug(fake)
    plug.on = initial

    with pytest.raises(DeviceUnreachable):
        plug.toggle()

    assert plug.on is (not initial)
    assert fake.commands == [command]


def test_failed_command_still_counts_for_rate_limit():
    plug = make_plug(RecordingExchange(error=DeviceUnreachable("10.0.0.5", "down")))

    with pytest.raises(DeviceUnreachable):
        plug.turn_on()
    assert plug.last_command_at is not None


def test_back_to_back_toggles_are_spaced():
    fake = RecordingExchange()
    plug = KasaPlug("10.0.0.5", 49, exchange=fake)

    plug.toggle()
    plug.toggle()

    first, second = fake.calls
    # small allowance for clock granularity
    assert second.started - first.started >= 0.499
    assert second.started - first.finished >= 0.499


def test_concurrent_toggles_do_not_interleave():
    fake = RecordingExchange(delay=0.02)
    plug = make_plug(fake, interval=0.01)

    threads = [threading.Thread(target=plug.toggle) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert fake.max_active == 1
    assert fake.commands == [SET_RELAY_ON, SET_RELAY_OFF] * 3
    for earlier, later in zip(fake.calls, fake.calls[1:]):
        assert later.started >= earlier.finished
    assert plug.on is False


def test_plugs_do_not_block_each_other():
    fake = RecordingExchange(delay=0.2)
    first = make_plug(fake, interval=0.0)
    second = KasaPlug("10.0.0.6", 50, exchange=fake)

    threads = [
        threading.Thread(target=first.toggle),
        threading.Thread(target=second.toggle),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)

    assert fake.max_active == 2


def test_plug_against_mock(mock_plug):
    plug = KasaPlug(
        "127.0.0.1",
        49,
        config=DeviceConfig(port=mock_plug.bound_port, command_interval=0),
    )

    plug.query_system_info()
    assert plug.name == "Desk Lamp"
    assert plug.on is False

    plug.toggle()
    assert mock_plug.relay_state == 1

    plug.toggle()
    assert mock_plug.relay_state == 0
