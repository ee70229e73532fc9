"""Quality-of-service write operations.

The QoS page is one form serving several actions; the submit button and
``QOS_Flag``/``qoSOptType`` select which one the CGI handler performs.

Confirmed payloads (adv_qos.asp)::

    DISCIPLINE: Qos_active=Yes&Qosdiscipline=SP&QosWRRweight1=8&QosWRRweight2=4
                &QosWRRweight3=2&QosWRRweight4=1&qoSOptType=discRule&QOS_Flag=4
                &Qosdisciplinesave=Discipline+Save

    ADD RULE:   QosRuleIndex=0&QosRuleActive=Yes&QosProtocol=TCP
                &QosDestPortValue1=5060&QosIPPValue1=6&QoS_Add=Add

    DELETE:     QosRuleIndex=0&QoS_Del=Delete
"""

from __future__ import annotations

from collections.abc import Mapping

from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.form_ops import read_merge_submit
from napalm_ptcl.model.qos import QosRuleChange
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.utils.validate import (
    validate_choice,
    validate_ipv4,
    validate_port,
    validate_priority,
    validate_rule_index,
    validate_weight,
)
from napalm_ptcl.vendor.ptcl.forms import (
    QOS_DISCIPLINE_FIXED,
    QOS_FORM,
    QOS_RULE_ADD_FIXED,
    QOS_RULE_DELETE_FIXED,
)
from napalm_ptcl.vendor.ptcl.mappings import (
    QOS_DISCIPLINES,
    QOS_PROTOCOLS,
    QOS_WEIGHT_FIELDS,
)


def set_qos_enabled(
    fetcher: PageFetcher,
    enabled: bool,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Turn QoS on or off, keeping the current discipline and weights."""
    return read_merge_submit(
        fetcher,
        QOS_FORM,
        lambda _current: {"Qos_active": "Yes" if enabled else "No"},
        fixed=QOS_DISCIPLINE_FIXED,
        success_message="QoS enabled successfully" if enabled else "QoS disabled",
        dry_run=dry_run,
    )


def discipline_delta(
    discipline: str,
    weights: Mapping[str, int] | None = None,
) -> dict[str, str]:
    """Fields selecting *discipline* and, for WRR, the queue weights.

    Args:
        discipline: ``"SP"`` or ``"WRR"``.
        weights: Optional ``{"high"|"medium"|"low": weight}``; ignored for SP.

    Raises:
        ValidationError: On an unknown discipline, queue name or weight.
    """
    delta = {"Qosdiscipline": validate_choice("discipline", discipline.upper(), QOS_DISCIPLINES)}
    if delta["Qosdiscipline"] == "WRR" and weights:
        for queue, weight in weights.items():
            validate_choice("weights", queue, QOS_WEIGHT_FIELDS)
            delta[QOS_WEIGHT_FIELDS[queue]] = str(validate_weight(queue, weight))
    return delta


def set_qos_discipline(
    fetcher: PageFetcher,
    discipline: str,
    weights: Mapping[str, int] | None = None,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Select the queueing discipline (strict priority or WRR)."""
    return read_merge_submit(
        fetcher,
        QOS_FORM,
        lambda _current: discipline_delta(discipline, weights),
        fixed=QOS_DISCIPLINE_FIXED,
        success_message=f"QoS discipline set to {discipline.upper()}",
        dry_run=dry_run,
    )


def qos_rule_delta(change: QosRuleChange) -> dict[str, str]:
    """Translate *change* into the rule fields of ``adv_qos.asp``.

    Raises:
        ValidationError: If a value is malformed or out of range.
    """
    delta = {
        "QosRuleIndex": str(validate_rule_index(change.rule_index)),
        "QosRuleActive": "Yes" if change.enabled else "No",
    }
    if change.protocol is not None:
        delta["QosProtocol"] = validate_choice("protocol", change.protocol.upper(), QOS_PROTOCOLS)
    if change.source_ip is not None:
        delta["QosSrcIpValue"] = validate_ipv4(change.source_ip, field="source_ip")
    if change.dest_ip is not None:
        delta["QosDestIpValue"] = validate_ipv4(change.dest_ip, field="dest_ip")
    if change.source_port is not None:
        delta["QosSrcPortValue1"] = str(validate_port(change.source_port, field="source_port"))
    if change.dest_port is not None:
        delta["QosDestPortValue1"] = str(validate_port(change.dest_port, field="dest_port"))
    if change.priority is not None:
        delta["QosIPPValue1"] = str(validate_priority(change.priority))
    return delta


def add_qos_rule(
    fetcher: PageFetcher,
    change: QosRuleChange,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Write a classification rule into slot ``change.rule_index``."""
    return read_merge_submit(
        fetcher,
        QOS_FORM,
        lambda _current: qos_rule_delta(change),
        fixed=QOS_RULE_ADD_FIXED,
        success_message="QoS rule added successfully",
        dry_run=dry_run,
    )


def delete_qos_rule(
    fetcher: PageFetcher,
    rule_index: int,
    *,
    dry_run: bool = False,
) -> OperationResult:
    """Delete the classification rule in slot *rule_index*."""
    return read_merge_submit(
        fetcher,
        QOS_FORM,
        lambda _current: {"QosRuleIndex": str(validate_rule_index(rule_index))},
        fixed=QOS_RULE_DELETE_FIXED,
        success_message=f"QoS rule {rule_index} deleted",
        dry_run=dry_run,
    )
