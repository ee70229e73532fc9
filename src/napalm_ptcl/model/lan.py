"""Typed models for LAN settings, hosts and LAN statistics."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.values import Flag


@dataclass(frozen=True)
class LanSettings:
    """LAN addressing and DHCP server configuration."""

    ip_address: str
    subnet_mask: str
    dhcp_enabled: Flag
    dhcp_start_ip: str
    dhcp_pool_size: int
    lease_time: str
    primary_dns: str
    secondary_dns: str


@dataclass(frozen=True)
class ArpEntry:
    """One ARP cache entry."""

    ip: str
    mac: str
    interface: str


@dataclass(frozen=True)
class DhcpLease:
    """One DHCP lease.

    Attributes:
        lease_time: Remaining lease, normalised to ``"N days HH:MM:SS"``.
    """

    hostname: str
    ip: str
    mac: str
    lease_time: str


@dataclass(frozen=True)
class ConnectedDevice:
    """An ARP entry joined with its DHCP lease.

    Attributes:
        hostname: Hostname from the lease, or ``"Unknown"``.
        lease_time: Remaining lease, or ``"Active"`` for static hosts.
    """

    hostname: str
    ip: str
    mac: str
    interface: str
    lease_time: str


@dataclass(frozen=True)
class PortStats:
    """Traffic counters of one LAN port."""

    port: str
    status: str
    packets_sent: int
    packets_received: int
    bytes_sent: int
    bytes_received: int


@dataclass(frozen=True)
class LanStats:
    """Per-port LAN counters with totals."""

    ports: tuple[PortStats, ...]

    @property
    def total_packets_sent(self) -> int:
        return sum(p.packets_sent for p in self.ports)

    @property
    def total_packets_received(self) -> int:
        return sum(p.packets_received for p in self.ports)


@dataclass
class LanChange:
    """Desired LAN/DHCP settings.  ``None`` fields are left as configured."""

    ip_address: str | None = None
    subnet_mask: str | None = None
    dhcp_enabled: bool | None = None
    dhcp_start_ip: str | None = None
    dhcp_pool_size: int | None = None
    dhcp_lease_time: int | None = None
