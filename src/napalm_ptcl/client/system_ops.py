"""Maintenance write operations: admin password, dynamic DNS, restart.

Confirmed payloads::

    tools_admin.asp:  adminFlag=1&uiViewTools_Password=...
                      &uiViewTools_PasswordConfirm=...&SaveBtn=Save

    access_ddns.asp:  Enable_DyDNS=Yes&ddns_ServerName=www.dyndns.org
                      &sysDNSHost=home.dyndns.org&sysDNSUser=me
                      &sysDNSPassword=...&Enable_Wildcard=No&SaveFlag=1&SaveBtn=Save

    tools_system.asp: testFlag=0&restoreFlag=1&rebootFlag=1&RestartBtn=Restart
"""

from __future__ import annotations

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.model.system import DdnsChange
from napalm_ptcl.utils.validate import validate_admin_password
from napalm_ptcl.vendor.ptcl.forms import (
    ADMIN_FORM,
    ADMIN_SAVE_FIXED,
    DDNS_FORM,
    DDNS_SAVE_FIXED,
    RESTART_FIXED,
    SYSTEM_FORM,
)


def _admin_delta(password: str) -> dict[str, str]:
    validate_admin_password(password)
    return {
        "uiViewTools_Password": password,
        "uiViewTools_PasswordConfirm": password,
    }


def set_admin_password(
    fetcher: PageFetcher,
    password: str,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Change the console admin password.

    The current session keeps working; new logins need the new password.
    """
    return read_merge_submit(
        fetcher,
        ADMIN_FORM,
        lambda _current: _admin_delta(password),
        fixed=ADMIN_SAVE_FIXED,
        success_message=(
            "Admin password changed successfully. "
            "Remember to update your login credentials."
        ),
        dry_run=dry_run,
    )


def ddns_delta(change: DdnsChange) -> dict[str, str]:
    delta: dict[str, str] = {}
    if change.enabled is not None:
        delta["Enable_DyDNS"] = "Yes" if change.enabled else "No"
    if change.provider is not None:
        delta["ddns_ServerName"] = change.provider
    if change.hostname is not None:
        delta["sysDNSHost"] = change.hostname
    if change.username is not None:
        delta["sysDNSUser"] = change.username
    if change.password is not None:
        delta["sysDNSPassword"] = change.password
    if change.wildcard is not None:
        delta["Enable_Wildcard"] = "Yes" if change.wildcard else "No"
    return delta


def set_ddns_settings(
    fetcher: PageFetcher,
    change: DdnsChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Apply *change* to the dynamic DNS form."""
    if change.enabled is False:
        message = "Dynamic DNS disabled"
    elif change.enabled:
        message = "Dynamic DNS enabled successfully"
    else:
        message = "Dynamic DNS settings updated"
    return read_merge_submit(
        fetcher,
        DDNS_FORM,
        lambda _current: ddns_delta(change),
        fixed=DDNS_SAVE_FIXED,
        success_message=message,
        dry_run=dry_run,
    )


def restart(fetcher: PageFetcher, *, dry_run: bool = False) -> OperationResult:
    """Reboot the router with its current settings.

    The session is unusable once the router goes down.
    """
    return read_merge_submit(
        fetcher,
        SYSTEM_FORM,
        lambda _current: {},
        fixed=RESTART_FIXED,
        success_message="Router is restarting",
        dry_run=dry_run,
    )
