"""Typed models for NAT, firewall and access-control pages."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.values import Flag


@dataclass(frozen=True)
class NatRule:
    """One virtual-server (port forwarding) row.

    Attributes:
        index: Position in the table; the slot ``delete_port_forwarding_rule``
            takes.
    """

    index: int
    name: str
    protocol: str
    external_port: str
    internal_port: str
    internal_ip: str
    enabled: bool


@dataclass(frozen=True)
class FirewallSettings:
    """Global firewall switches.  DoS protection follows the firewall."""

    firewall_enabled: Flag
    spi_enabled: Flag
    dos_protection: Flag


@dataclass(frozen=True)
class FirewallRule:
    """One firewall rule row.

    Attributes:
        action: ``"deny"`` or ``"allow"``.
        direction: ``"inbound"`` or ``"outbound"``.
    """

    name: str
    action: str
    direction: str
    protocol: str
    source_ip: str
    dest_ip: str
    port: str


@dataclass(frozen=True)
class IpFilterRule:
    """One IP/MAC filter row."""

    name: str
    action: str
    source_ip: str
    dest_ip: str
    protocol: str
    port: str


@dataclass(frozen=True)
class ParentalRule:
    """One parental-control schedule."""

    mac: str
    days: tuple[str, ...]
    start_time: str
    end_time: str


@dataclass(frozen=True)
class ParentalControl:
    enabled: Flag
    rules: tuple[ParentalRule, ...]


@dataclass(frozen=True)
class UpnpMapping:
    """One port mapping opened by a UPnP client."""

    description: str
    protocol: str
    external_port: int
    internal_port: int
    internal_client: str


@dataclass(frozen=True)
class UpnpStatus:
    enabled: Flag
    mappings: tuple[UpnpMapping, ...]


@dataclass
class PortForwardRule:
    """A virtual-server entry to add.

    Attributes:
        name: Application label shown in the router UI.
        protocol: ``"TCP"``, ``"UDP"`` or ``"ALL"``.
        external_port: Public port.
        internal_ip: LAN host receiving the traffic.
        internal_port: LAN port (defaults to *external_port*).
        enabled: Whether the rule is active.
    """

    name: str
    protocol: str
    external_port: int
    internal_ip: str
    internal_port: int | None = None
    enabled: bool = True


@dataclass
class MacFilterChange:
    """A MAC filter rule to write into one of the router's rule slots.

    Attributes:
        mac_address: ``XX:XX:XX:XX:XX:XX``.
        action: ``"block"`` (black list) or ``"allow"`` (white list).
        direction: ``"both"``, ``"incoming"`` or ``"outgoing"``.
        rule_index: Rule slot, 0-15.
        enabled: Whether the rule is active.
    """

    mac_address: str
    action: str = "block"
    direction: str = "both"
    rule_index: int = 0
    enabled: bool = True
