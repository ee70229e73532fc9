"""Caller-input validation for write operations.

Every check raises :exc:`~napalm_ptcl.client.errors.ValidationError` naming
the offending field; nothing here touches the network.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Collection

from napalm_ptcl.client.errors import ValidationError

_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$")


def _check_range(field: str, value: int, low: int, high: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"{what} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ValidationError(field, f"{what} must be between {low} and {high}, got {value}")
    return value


def validate_ssid(ssid: str) -> str:
    if not 1 <= len(ssid) <= 32:
        raise ValidationError("ssid", "SSID must be between 1 and 32 characters")
    return ssid


def validate_wifi_password(password: str) -> str:
    if len(password) < 8:
        raise ValidationError("password", "Password must be at least 8 characters")
    if len(password) > 63:
        raise ValidationError("password", "Password must be at most 63 characters")
    return password


def validate_channel(channel: int) -> int:
    """Channel 1-14, or 0 for automatic selection."""
    return _check_range("channel", channel, 0, 14, "Channel (0 = auto)")


def validate_mac(mac: str) -> str:
    """Return *mac* upper-cased with colon separators.

    Raises:
        ValidationError: Unless *mac* is six hex pairs separated by ``:``
            or ``-``.
    """
    if not _MAC_RE.match(mac):
        raise ValidationError(
            "mac_address", "Invalid MAC address format. Use format: XX:XX:XX:XX:XX:XX"
        )
    return mac.upper().replace("-", ":")


def validate_ipv4(value: str, field: str = "ip_address") -> str:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        raise ValidationError(field, f"Invalid IPv4 address: {value!r}") from None
    return value


def validate_priority(priority: int) -> int:
    return _check_range("priority", priority, 0, 7, "Priority")


def validate_port(port: int, field: str = "port") -> int:
    return _check_range(field, port, 1, 65535, "Port")


def validate_pool_size(size: int) -> int:
    return _check_range("dhcp_pool_size", size, 1, 254, "Pool size")


def validate_mtu(mtu: int) -> int:
    return _check_range("mtu", mtu, 576, 1500, "MTU")


def validate_vlan_id(vlan_id: int) -> int:
    return _check_range("vlan_id", vlan_id, 0, 4094, "VLAN id")


def validate_rule_index(index: int) -> int:
    return _check_range("rule_index", index, 0, 15, "Rule index")


def validate_lease_time(seconds: int) -> int:
    return _check_range("dhcp_lease_time", seconds, 1, 2**31 - 1, "Lease time")


def validate_weight(field: str, weight: int) -> int:
    return _check_range(field, weight, 1, 255, "WRR weight")


def validate_admin_password(password: str) -> str:
    if not password:
        raise ValidationError("password", "Password cannot be empty")
    return password


def validate_pppoe_credentials(username: str | None, password: str | None) -> None:
    if not username or not password:
        raise ValidationError("ppp_username", "Username and password are required")


def validate_choice(field: str, value: str, choices: Collection[str]) -> str:
    if value not in choices:
        raise ValidationError(field, f"{field} must be one of {sorted(choices)}, got {value!r}")
    return value
