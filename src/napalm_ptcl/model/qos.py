"""Typed models for quality-of-service settings."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ptcl.model.values import Flag


@dataclass(frozen=True)
class QosRule:
    """One classification rule row."""

    name: str
    priority: str
    protocol: str
    port: str


@dataclass(frozen=True)
class QosSettings:
    """QoS state, queueing discipline and the rule table.

    Attributes:
        discipline: ``"SP"`` (strict priority) or ``"WRR"``.
        weights: WRR weights of queues 1-4 (highest priority first).
    """

    enabled: Flag
    total_bandwidth: str
    discipline: str
    weights: tuple[int, int, int, int]
    rules: tuple[QosRule, ...]


@dataclass
class QosRuleChange:
    """A classification rule to write into one of the router's rule slots.

    Attributes:
        rule_index: Rule slot, 0-15.
        protocol: ``"TCP/UDP"``, ``"TCP"``, ``"UDP"``, ``"ICMP"``, ``"IGMP"``
            or ``None`` to keep the form's current choice.
        priority: IP precedence to mark, 0-7.
    """

    rule_index: int = 0
    enabled: bool = True
    protocol: str | None = None
    source_ip: str | None = None
    dest_ip: str | None = None
    source_port: int | None = None
    dest_port: int | None = None
    priority: int | None = None
