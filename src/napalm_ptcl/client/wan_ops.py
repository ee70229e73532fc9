"""WAN and PPPoE write operations.

Confirmed payload (home_wan.asp)::

    wanTypeRadio=2&wan_PPPUsername=user@ptcl&wan_PPPPassword=...
    &wan_NAT0=Enable&wan_TCPMTU0=1492&wan_vid=0&SaveBtn=Save

Fields:
    wanTypeRadio: "0" dynamic, "1" static, "2" PPPoE, "3" bridge
    wan_NAT0:     "Enable" / "Disabled"
"""

from __future__ import annotations

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.device import WanChange
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.utils.validate import (
    validate_choice,
    validate_mtu,
    validate_pppoe_credentials,
    validate_vlan_id,
)
from napalm_ptcl.vendor.ptcl.forms import WAN_FORM, WAN_SAVE_FIXED
from napalm_ptcl.vendor.ptcl.mappings import CONNECTION_TYPE_TO_CODE


def wan_delta(change: WanChange) -> dict[str, str]:
    """Translate *change* into ``home_wan.asp`` fields.

    PPPoE credentials are only accepted as a pair.

    Raises:
        ValidationError: If a supplied value is malformed or out of range.
    """
    delta: dict[str, str] = {}
    if change.connection_type is not None:
        kind = validate_choice(
            "connection_type", change.connection_type.lower(), CONNECTION_TYPE_TO_CODE
        )
        delta["wanTypeRadio"] = CONNECTION_TYPE_TO_CODE[kind]
    if change.ppp_username is not None or change.ppp_password is not None:
        validate_pppoe_credentials(change.ppp_username, change.ppp_password)
        delta["wan_PPPUsername"] = str(change.ppp_username)
        delta["wan_PPPPassword"] = str(change.ppp_password)
    if change.nat_enabled is not None:
        delta["wan_NAT0"] = "Enable" if change.nat_enabled else "Disabled"
    if change.mtu is not None:
        delta["wan_TCPMTU0"] = str(validate_mtu(change.mtu))
    if change.vlan_id is not None:
        delta["wan_vid"] = str(validate_vlan_id(change.vlan_id))
    return delta


def set_wan_settings(
    fetcher: PageFetcher,
    change: WanChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Apply *change* to the WAN settings form."""
    return read_merge_submit(
        fetcher,
        WAN_FORM,
        lambda _current: wan_delta(change),
        fixed=WAN_SAVE_FIXED,
        success_message="WAN settings updated successfully",
        dry_run=dry_run,
    )
