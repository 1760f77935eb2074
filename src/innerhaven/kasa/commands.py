from __future__ import annotations

GET_SYSINFO = b'{"system":{"get_sysinfo":{}}}'
SET_RELAY_ON = b'{"system":{"set_relay_state":{"state":1}}}'
SET_RELAY_OFF = b'{"system":{"set_relay_state":{"state":0}}}'
