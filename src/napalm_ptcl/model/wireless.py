"""Typed models for the wireless LAN."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.values import Flag


@dataclass(frozen=True)
class WirelessSettings:
    """Configured wireless settings (the passphrase is never read back)."""

    enabled: Flag
    ssid: str
    channel: str
    security: str
    hidden: Flag


@dataclass(frozen=True)
class WifiClient:
    """A station associated with the access point."""

    mac: str


@dataclass(frozen=True)
class WifiStatus:
    """Live wireless status with the associated stations."""

    ssid: str
    channel: str
    security: str
    client_count: int
    clients: tuple[WifiClient, ...]


@dataclass(frozen=True)
class WlanStats:
    """Wireless interface frame counters."""

    tx_frames: int
    rx_frames: int
    tx_errors: int
    rx_errors: int
    tx_dropped: int
    rx_dropped: int

    @property
    def errors(self) -> int:
        return self.tx_errors + self.rx_errors

    @property
    def dropped(self) -> int:
        return self.tx_dropped + self.rx_dropped


@dataclass
class WifiChange:
    """Desired wireless settings.  ``None`` fields are left as configured.

    Attributes:
        enabled: Turn the radio on or off.
        ssid: Network name, 1-32 characters.
        password: WPA passphrase, 8-63 characters.
        channel: Channel 1-14, or 0 for automatic selection.
        hidden: Hide the SSID from beacons.
    """

    enabled: bool | None = None
    ssid: str | None = None
    password: str | None = None
    channel: int | None = None
    hidden: bool | None = None
