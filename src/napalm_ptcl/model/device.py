"""Typed models for device, WAN and DSL line status."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.values import Flag


@dataclass(frozen=True)
class DeviceInfo:
    """General device information from the device-info status page.

    Every text field is the parsed value or ``UNKNOWN``.
    """

    model: str
    firmware_version: str
    hardware_version: str
    serial_number: str
    uptime: str
    lan_mac: str
    wlan_mac: str
    lan_status: str
    wlan_status: str
    lan_ip: str
    subnet_mask: str
    dhcp_enabled: Flag
    gateway: str
    primary_dns: str
    secondary_dns: str


@dataclass(frozen=True)
class WanInfo:
    """Active WAN connection summary.

    Attributes:
        wan_ip: IPv4 address of the first active, connected WAN service.
        connection_status: ``"Connected"`` when an active address was found.
        connection_type: ``"Dynamic"``, ``"Static"``, ``"PPPoE"`` or
            ``"Bridge"``.
        dsl_mode: Line mode reported by the status script.
    """

    wan_ip: str
    connection_status: str
    connection_type: str
    dsl_mode: str
    gateway: str
    primary_dns: str
    secondary_dns: str


@dataclass(frozen=True)
class WanService:
    """One row of the WAN service table."""

    service_name: str
    protocol: str
    status: str
    ip_address: str
    vpi: str
    vci: str


@dataclass(frozen=True)
class DslStats:
    """DSL line status.  Figures are as displayed (``"12.3 dB"``)."""

    line_state: str
    modulation: str
    annex_mode: str
    snr_margin_down: str
    snr_margin_up: str
    attenuation_down: str
    attenuation_up: str
    line_rate_down: str
    line_rate_up: str


@dataclass(frozen=True)
class AdslStats:
    """ADSL error and block counters."""

    received_blocks: int
    transmitted_blocks: int
    cell_delineation: int
    crc_errors: int
    header_errors: int


@dataclass
class WanChange:
    """Desired WAN settings.  ``None`` fields are left as configured.

    Attributes:
        connection_type: ``"dynamic"``, ``"static"``, ``"pppoe"`` or
            ``"bridge"``.
        ppp_username: PPPoE username (required together with the password).
        ppp_password: PPPoE password.
        nat_enabled: Enable NAT on the WAN interface.
        mtu: TCP MTU, 576-1500.
        vlan_id: 802.1Q VLAN id, 0-4094.
    """

    connection_type: str | None = None
    ppp_username: str | None = None
    ppp_password: str | None = None
    nat_enabled: bool | None = None
    mtu: int | None = None
    vlan_id: int | None = None
