from __future__ import annotations

from pydantic import BaseModel, Field


class SystemInfo(BaseModel):
    """Fields reported by ``system.get_sysinfo``."""

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    alias: str = ""
    model: str = ""
    relay_state: int = 0
    software_version: str = Field(default="", alias="sw_ver")
    hardware_version: str = Field(default="", alias="hw_ver")
    device_id: str = Field(default="", alias="deviceId")
    oem_id: str = Field(default="", alias="oemId")
    hardware_id: str = Field(default="", alias="hwId")
    mac: str = ""
    rssi: float = 0.0
    longitude: float = 0.0
    latitude: float = 0.0
    updating: int = 0
    led_off: int = 0
    on_time: int = 0
    active_mode: str = ""
    icon_hash: str = ""
    err_code: int = 0

    @property
    def is_on(self) -> bool:
        return self.relay_state == 1


class SysinfoCommand(BaseModel):
    model_config = {"extra": "ignore"}

    get_sysinfo: SystemInfo


class SysinfoResponse(BaseModel):
    """Response envelope ``{"system": {"get_sysinfo": {...}}}``."""

    model_config = {"extra": "ignore"}

    system: SysinfoCommand
