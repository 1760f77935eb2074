"""Tests for the mock plug request handling."""

import json

from innerhaven.mock_plug import MockKasaPlug


def test_sysinfo_reports_identity_and_state():
    plug = MockKasaPlug(alias="Fan", relay_state=1)

    reply = json.loads(plug.handle_request(b'{"system":{"get_sysinfo":{}}}'))

    info = reply["system"]["get_sysinfo"]
    assert info["alias"] == "Fan"
    assert info["relay_state"] == 1


def test_set_relay_state():
    plug = MockKasaPlug()

    reply = json.loads(
        plug.handle_request(b'{"system":{"set_relay_state":{"state":1}}}')
    )

    assert reply == {"system": {"set_relay_state": {"err_code": 0}}}
    assert plug.relay_state == 1


def test_invalid_relay_state():
    plug = MockKasaPlug()

    reply = json.loads(
        plug.handle_request(b'{"system":{"set_relay_state":{"state":7}}}')
    )

    assert reply["system"]["set_relay_state"]["err_code"] == -3
    assert plug.relay_state == 0


def test_unsupported_module_and_method():
    plug = MockKasaPlug()

    reply = json.loads(
        plug.handle_request(b'{"emeter":{"get_realtime":{}},"system":{"reboot":{}}}')
    )

    assert reply["emeter"]["err_code"] == -1
    assert reply["system"]["reboot"]["err_code"] == -2


def test_malformed_request():
    plug = MockKasaPlug()

    assert plug.handle_request(b"[1, 2") == b""
    assert plug.handle_request(b"[1, 2]") == b""
    assert plug.requests == []
