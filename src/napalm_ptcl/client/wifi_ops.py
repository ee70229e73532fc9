"""Wireless LAN write operations.

Confirmed payload (home_wireless.asp, form ``WLAN``), all other harvested
fields resent unchanged::

    wlan_APenable=1&ESSID=Guest&ESSID_HIDE_Selection=0&Channel_ID=6
    &WEP_Selection=WPA2PSK&PreSharedKey1=...&wlanWEPFlag=3 ...

Fields:
    wlan_APenable:        "1" = radio on, "0" = off
    ESSID:                network name
    ESSID_HIDE_Selection: "0" = broadcast, "1" = hidden
    Channel_ID:           "0" = auto, "1".."14"
    PreSharedKey1:        WPA passphrase
"""

from __future__ import annotations

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.model.wireless import WifiChange
from napalm_ptcl.utils.validate import (
    validate_channel,
    validate_ssid,
    validate_wifi_password,
)
from napalm_ptcl.vendor.ptcl.forms import WIRELESS_FORM


def wifi_delta(change: WifiChange) -> dict[str, str]:
    """Translate *change* into ``home_wireless.asp`` fields.

    Raises:
        ValidationError: If a supplied value is out of range.
    """
    delta: dict[str, str] = {}
    if change.enabled is not None:
        delta["wlan_APenable"] = "1" if change.enabled else "0"
    if change.ssid is not None:
        delta["ESSID"] = validate_ssid(change.ssid)
    if change.password is not None:
        delta["PreSharedKey1"] = validate_wifi_password(change.password)
    if change.channel is not None:
        delta["Channel_ID"] = str(validate_channel(change.channel))
    if change.hidden is not None:
        delta["ESSID_HIDE_Selection"] = "1" if change.hidden else "0"
    return delta


def set_wifi_settings(
    fetcher: PageFetcher,
    change: WifiChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Apply *change* to the wireless settings form."""
    return read_merge_submit(
        fetcher,
        WIRELESS_FORM,
        lambda _current: wifi_delta(change),
        success_message="WiFi settings updated successfully",
        dry_run=dry_run,
    )
