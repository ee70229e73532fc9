"""Typed models for logs, maintenance and miscellaneous status pages."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.device import DeviceInfo, DslStats, WanInfo
from napalm_ptcl.model.values import Flag
from napalm_ptcl.model.wireless import WifiStatus


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    message: str


@dataclass(frozen=True)
class SystemTime:
    current_time: str
    timezone: str
    ntp_enabled: Flag
    ntp_server: str


@dataclass(frozen=True)
class DdnsSettings:
    """Dynamic DNS client configuration (the password is never read back)."""

    enabled: Flag
    provider: str
    hostname: str
    username: str
    wildcard: Flag
    status: str


@dataclass(frozen=True)
class VpnSettings:
    enabled: Flag
    vpn_type: str
    server: str
    username: str
    status: str


@dataclass(frozen=True)
class RoutingEntry:
    """One routing table row."""

    destination: str
    gateway: str
    netmask: str
    interface: str
    metric: int


@dataclass(frozen=True)
class InterfaceGroup:
    """A port-binding group tying LAN ports to a WAN interface."""

    name: str
    lan_ports: tuple[str, ...]
    wan_interface: str


@dataclass(frozen=True)
class FullStatus:
    """Aggregate of the main status pages."""

    device: DeviceInfo
    wan: WanInfo
    wifi: WifiStatus
    dsl: DslStats


@dataclass
class DdnsChange:
    """Desired DDNS settings.  ``None`` fields are left as configured."""

    enabled: bool | None = None
    provider: str | None = None
    hostname: str | None = None
    username: str | None = None
    password: str | None = None
    wildcard: bool | None = None
