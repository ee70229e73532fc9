"""LAN addressing and DHCP server write operations.

Confirmed payload (home_lan.asp)::

    uiViewIPAddr=192.168.10.1&uiViewNetMask=255.255.255.0
    &uiViewAliasIPAddr=192.168.2.1&uiViewAliasNetMask=255.255.255.0
    &dhcpTypeRadio=1&StartIp=192.168.10.2&PoolSize=250&dhcp_LeaseTime=86400
    &dnsTypeRadio=0&dhcpFlag=0&lanFlag=0&aliasFlag=Yes&DNSproxy=Yes

Fields:
    dhcpTypeRadio: "0" = disabled, "1" = server, "2" = relay
    PoolSize:      number of addresses from StartIp
    dhcp_LeaseTime: seconds
"""

from __future__ import annotations

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.lan import LanChange
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.utils.validate import (
    validate_ipv4,
    validate_lease_time,
    validate_pool_size,
)
from napalm_ptcl.vendor.ptcl.forms import LAN_FORM


def lan_delta(change: LanChange) -> dict[str, str]:
    """Translate *change* into ``home_lan.asp`` fields.

    Raises:
        ValidationError: If a supplied value is malformed or out of range.
    """
    delta: dict[str, str] = {}
    if change.ip_address is not None:
        delta["uiViewIPAddr"] = validate_ipv4(change.ip_address)
    if change.subnet_mask is not None:
        delta["uiViewNetMask"] = validate_ipv4(change.subnet_mask, field="subnet_mask")
    if change.dhcp_enabled is not None:
        delta["dhcpTypeRadio"] = "1" if change.dhcp_enabled else "0"
    if change.dhcp_start_ip is not None:
        delta["StartIp"] = validate_ipv4(change.dhcp_start_ip, field="dhcp_start_ip")
    if change.dhcp_pool_size is not None:
        delta["PoolSize"] = str(validate_pool_size(change.dhcp_pool_size))
    if change.dhcp_lease_time is not None:
        delta["dhcp_LeaseTime"] = str(validate_lease_time(change.dhcp_lease_time))
    return delta


def set_lan_settings(
    fetcher: PageFetcher,
    change: LanChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Apply *change* to the LAN settings form."""
    return read_merge_submit(
        fetcher,
        LAN_FORM,
        lambda _current: lan_delta(change),
        success_message="LAN settings updated successfully",
        dry_run=dry_run,
    )
