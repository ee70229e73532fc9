"""Virtual-server (port forwarding) write operations.

Confirmed payloads (adv_nat_virsvr.asp)::

    ADD: Application=Web&SelectProtocol=TCP&start_port=8080&end_port=8080
         &Addr=192.168.10.20&local_sport=80&local_eport=80&enbl=on
         &isLocalPortSupport=Yes&enblflag=Yes&editFlag=0&delFlag=0&editnum=-1

    DELETE RULE 2: ...&delFlag=1&editnum=2

Fields:
    editnum: "-1" appends a rule; otherwise the 0-based rule slot
    enbl:    "on" / "off"
"""

from __future__ import annotations

from napalm_ptcl.client.errors import ValidationError
from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.model.security import PortForwardRule
from napalm_ptcl.utils.validate import (
    validate_choice,
    validate_ipv4,
    validate_port,
    validate_rule_index,
)
from napalm_ptcl.vendor.ptcl.forms import (
    VIRTUAL_SERVER_ADD_FIXED,
    VIRTUAL_SERVER_DELETE_FIXED,
    VIRTUAL_SERVER_FORM,
)
from napalm_ptcl.vendor.ptcl.mappings import PORT_FORWARD_PROTOCOLS


def port_forward_delta(rule: PortForwardRule) -> dict[str, str]:
    """Translate *rule* into ``adv_nat_virsvr.asp`` fields.

    Single-port rules only: start and end ports are equal on both sides.

    Raises:
        ValidationError: If a value is malformed or out of range.
    """
    if not rule.name.strip():
        raise ValidationError("name", "Rule name cannot be empty")
    protocol = validate_choice("protocol", rule.protocol.upper(), PORT_FORWARD_PROTOCOLS)
    external = str(validate_port(rule.external_port, field="external_port"))
    internal_port = rule.internal_port if rule.internal_port is not None else rule.external_port
    internal = str(validate_port(internal_port, field="internal_port"))
    return {
        "Application": rule.name,
        "SelectProtocol": protocol,
        "start_port": external,
        "end_port": external,
        "Addr": validate_ipv4(rule.internal_ip, field="internal_ip"),
        "local_sport": internal,
        "local_eport": internal,
        "enbl": "on" if rule.enabled else "off",
    }


def add_port_forwarding_rule(
    fetcher: PageFetcher,
    rule: PortForwardRule,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Append *rule* to the virtual-server table."""
    return read_merge_submit(
        fetcher,
        VIRTUAL_SERVER_FORM,
        lambda _current: port_forward_delta(rule),
        fixed=VIRTUAL_SERVER_ADD_FIXED,
        success_message=f'Port forwarding rule "{rule.name}" added successfully',
        dry_run=dry_run,
    )


def delete_port_forwarding_rule(
    fetcher: PageFetcher,
    rule_index: int,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Delete the virtual-server rule in slot *rule_index*."""
    return read_merge_submit(
        fetcher,
        VIRTUAL_SERVER_FORM,
        lambda _current: {"editnum": str(validate_rule_index(rule_index))},
        fixed=VIRTUAL_SERVER_DELETE_FIXED,
        success_message=f"Port forwarding rule at index {rule_index} deleted",
        dry_run=dry_run,
    )
