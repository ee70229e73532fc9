"""MAC filter write operations.

Confirmed payloads (access_ipfilter.asp, form ``IPFILTERform``)::

    SET:    RuleTypeSEL=Black&FILTERRuleTypeSEL=MAC&MacAddrTXT=AA:BB:CC:DD:EE:FF
            &RuleActiveRDO=Yes&DirectionSEL=Both&RuleIndexSEL=0
            &InterfaceSEL=LAN&RuleTypeChange=1&IpFilterApply=Set

    DELETE: RuleIndexSEL=3&IpFilterDelete=Delete

Fields:
    RuleTypeSEL:   "Black" blocks listed hosts, "White" allows only them
    RuleIndexSEL:  rule slot 0-15
"""

from __future__ import annotations

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.model.security import MacFilterChange
from napalm_ptcl.utils.validate import validate_choice, validate_mac, validate_rule_index
from napalm_ptcl.vendor.ptcl.forms import (
    IP_FILTER_FORM,
    MAC_FILTER_DELETE_FIXED,
    MAC_FILTER_SET_FIXED,
)
from napalm_ptcl.vendor.ptcl.mappings import FILTER_ACTIONS, FILTER_DIRECTIONS


def mac_filter_delta(change: MacFilterChange) -> dict[str, str]:
    """Translate *change* into ``access_ipfilter.asp`` fields.

    Raises:
        ValidationError: If a value is malformed or out of range.
    """
    action = validate_choice("action", change.action.lower(), FILTER_ACTIONS)
    direction = validate_choice("direction", change.direction.lower(), FILTER_DIRECTIONS)
    return {
        "RuleTypeSEL": FILTER_ACTIONS[action],
        "MacAddrTXT": validate_mac(change.mac_address),
        "RuleActiveRDO": "Yes" if change.enabled else "No",
        "DirectionSEL": FILTER_DIRECTIONS[direction],
        "RuleIndexSEL": str(validate_rule_index(change.rule_index)),
    }


def set_mac_filter(
    fetcher: PageFetcher,
    change: MacFilterChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Write a MAC filter rule into slot ``change.rule_index``."""
    verb = "blocked" if change.action.lower() == "block" else "allowed"
    return read_merge_submit(
        fetcher,
        IP_FILTER_FORM,
        lambda _current: mac_filter_delta(change),
        fixed=MAC_FILTER_SET_FIXED,
        success_message=f"MAC address {change.mac_address} {verb}",
        dry_run=dry_run,
    )


def delete_mac_filter(
    fetcher: PageFetcher,
    rule_index: int,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Delete the filter rule in slot *rule_index*."""
    return read_merge_submit(
        fetcher,
        IP_FILTER_FORM,
        lambda _current: {"RuleIndexSEL": str(validate_rule_index(rule_index))},
        fixed=MAC_FILTER_DELETE_FIXED,
        success_message=f"MAC filter rule at index {rule_index} deleted",
        dry_run=dry_run,
    )
