"""Unit tests for napalm_ptcl.utils.validate."""

from __future__ import annotations

import pytest

from napalm_ptcl.client.errors import ValidationError
from napalm_ptcl.utils.validate import (
    validate_admin_password,
    validate_channel,
    validate_choice,
    validate_ipv4,
    validate_lease_time,
    validate_mac,
    validate_mtu,
    validate_pool_size,
    validate_port,
    validate_pppoe_credentials,
    validate_priority,
    validate_rule_index,
    validate_ssid,
    validate_vlan_id,
    validate_weight,
    validate_wifi_password,
)


class TestSsid:
    @pytest.mark.parametrize("length", [1, 32])
    def test_accepts_bounds(self, length: int) -> None:
        assert validate_ssid("s" * length) == "s" * length

    @pytest.mark.parametrize("length", [0, 33])
    def test_rejects_outside_bounds(self, length: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_ssid("s" * length)
        assert exc_info.value.field == "ssid"


class TestWifiPassword:
    @pytest.mark.parametrize("length", [8, 63])
    def test_accepts_bounds(self, length: int) -> None:
        assert validate_wifi_password("p" * length) == "p" * length

    def test_too_short(self) -> None:
        with pytest.raises(ValidationError, match="at least 8"):
            validate_wifi_password("p" * 7)

    def test_too_long(self) -> None:
        with pytest.raises(ValidationError, match="at most 63"):
            validate_wifi_password("p" * 64)


@pytest.mark.parametrize(
    "validator, low, high",
    [
        (validate_channel, 0, 14),
        (validate_priority, 0, 7),
        (validate_port, 1, 65535),
        (validate_pool_size, 1, 254),
        (validate_mtu, 576, 1500),
        (validate_vlan_id, 0, 4094),
        (validate_rule_index, 0, 15),
    ],
)
def test_integer_ranges(validator, low: int, high: int) -> None:  # type: ignore[no-untyped-def]
    assert validator(low) == low
    assert validator(high) == high
    for bad in (low - 1, high + 1):
        with pytest.raises(ValidationError):
            validator(bad)


@pytest.mark.parametrize("value", [True, "6", 6.0, None])
def test_integer_checks_reject_non_integers(value: object) -> None:
    with pytest.raises(ValidationError, match="integer"):
        validate_channel(value)  # type: ignore[arg-type]


def test_lease_time_must_be_positive() -> None:
    assert validate_lease_time(1) == 1
    with pytest.raises(ValidationError):
        validate_lease_time(0)


def test_weight_names_the_queue() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_weight("high", 0)
    assert exc_info.value.field == "high"


class TestMac:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("aa:bb:cc:dd:ee:ff", "AA:BB:CC:DD:EE:FF"),
            ("AA-BB-CC-DD-EE-0F", "AA:BB:CC:DD:EE:0F"),
        ],
    )
    def test_normalised(self, raw: str, expected: str) -> None:
        assert validate_mac(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["", "AA:BB:CC:DD:EE", "AA:BB:CC:DD:EE:FG", "AABBCCDDEEFF", "AA:BB:CC:DD:EE:FF:00"]
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError, match="XX:XX:XX:XX:XX:XX"):
            validate_mac(raw)


class TestIpv4:
    def test_accepts_dotted_quad(self) -> None:
        assert validate_ipv4("192.168.10.1") == "192.168.10.1"

    @pytest.mark.parametrize("raw", ["", "192.168.10", "192.168.10.256", "fe80::1", "host"])
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_ipv4(raw, field="dhcp_start_ip")
        assert exc_info.value.field == "dhcp_start_ip"


def test_admin_password_not_empty() -> None:
    assert validate_admin_password("x") == "x"
    with pytest.raises(ValidationError):
        validate_admin_password("")


@pytest.mark.parametrize("username, password", [("u", None), (None, "p"), ("", "p"), ("u", "")])
def test_pppoe_credentials_required_together(username: str | None, password: str | None) -> None:
    with pytest.raises(ValidationError, match="required"):
        validate_pppoe_credentials(username, password)


def test_choice() -> None:
    assert validate_choice("discipline", "SP", {"SP", "WRR"}) == "SP"
    with pytest.raises(ValidationError, match=r"\['SP', 'WRR'\]"):
        validate_choice("discipline", "FIFO", {"SP", "WRR"})


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_channel(99)
