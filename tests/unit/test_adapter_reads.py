"""Unit tests for the read surface of napalm_ptcl.adapter.RouterAdapter.

Pages are served by :mod:`responses`; the adapter uses its real fetcher.
"""

from __future__ import annotations

import pathlib

import pytest
import requests
import responses as rsps_lib

from napalm_ptcl.adapter import RouterAdapter, normalize_lease_time
from napalm_ptcl.client.errors import RouterRequestError, RouterResponseError, SessionExpiredError
from napalm_ptcl.client.session import RouterSession
from napalm_ptcl.model.values import UNKNOWN
from napalm_ptcl.vendor.ptcl import endpoints

FIXTURES = pathlib.Path(__file__).parent.parent / "fixtures"
BASE = "http://192.168.10.1"
SESSION = RouterSession(
    host="192.168.10.1", session_id="read01", cookies=(("SESSIONID", "read01"),)
)


def _serve(path: str, fixture: str | None = None, body: str | None = None) -> None:
    text = (FIXTURES / fixture).read_text() if fixture else body or ""
    rsps_lib.add(rsps_lib.GET, f"{BASE}{path}", body=text, status=200)


def _table(*rows: tuple[str, ...]) -> str:
    trs = "".join("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>" for row in rows)
    return f"<html><body><table>{trs}</table></body></html>"


@pytest.fixture()
def adapter() -> RouterAdapter:
    return RouterAdapter(SESSION)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

@rsps_lib.activate
def test_device_info(adapter: RouterAdapter) -> None:
    _serve(endpoints.DEVICE_INFO, "status_deviceinfo.html")
    info = adapter.get_device_info()
    assert info.model == "PTCL-HG680"
    assert info.firmware_version == "V3.1.0-PTCL"
    assert info.serial_number == "ZTE1234567890"
    assert info.lan_mac == "a8:f7:e0:12:34:56"
    assert info.lan_ip == "192.168.10.1"
    assert info.dhcp_enabled is True
    assert info.gateway == "10.12.0.1"
    assert info.primary_dns == "203.82.48.3"
    assert info.secondary_dns == "203.82.48.4"
    assert rsps_lib.calls[0].request.headers["Cookie"] == "SESSIONID=read01"


@rsps_lib.activate
def test_device_info_on_empty_page_is_unknown(adapter: RouterAdapter) -> None:
    _serve(endpoints.DEVICE_INFO, body="<html></html>")
    info = adapter.get_device_info()
    assert info.model == UNKNOWN
    assert info.gateway == UNKNOWN


@rsps_lib.activate
def test_repeated_reads_are_equal(adapter: RouterAdapter) -> None:
    _serve(endpoints.DEVICE_INFO, "status_deviceinfo.html")
    assert adapter.get_device_info() == adapter.get_device_info()


@rsps_lib.activate
def test_wan_info(adapter: RouterAdapter) -> None:
    _serve(endpoints.WAN_STATUS, "wan.html")
    wan = adapter.get_wan_info()
    assert wan.wan_ip == "39.45.10.20"
    assert wan.connection_status == "Connected"
    assert wan.connection_type == "PPPoE"
    assert wan.dsl_mode == "VDSL2"
    assert wan.gateway == "39.45.10.1"
    assert wan.primary_dns == "203.82.48.3"
    assert wan.secondary_dns == "203.82.48.4"


@rsps_lib.activate
def test_wan_info_without_active_service(adapter: RouterAdapter) -> None:
    _serve(endpoints.WAN_STATUS, body='<script>var pvc8_serv_info = [];</script>')
    wan = adapter.get_wan_info()
    assert wan.wan_ip == UNKNOWN
    assert wan.connection_status == UNKNOWN
    assert wan.connection_type == UNKNOWN


@rsps_lib.activate
def test_arp_table_skips_placeholders(adapter: RouterAdapter) -> None:
    _serve(endpoints.ARP_TABLE, "arp.html")
    arp = adapter.get_arp_table()
    assert [(e.ip, e.mac, e.interface) for e in arp] == [
        ("192.168.10.2", "AA:BB:CC:00:11:22", "br0"),
        ("192.168.10.3", "aa:bb:cc:00:11:33", "br0"),
    ]


@rsps_lib.activate
def test_dhcp_leases(adapter: RouterAdapter) -> None:
    _serve(endpoints.DHCP_INFO, "dhcpinfo.html")
    leases = adapter.get_dhcp_leases()
    assert len(leases) == 2
    assert leases[0].hostname == "laptop"
    assert leases[0].lease_time == "0 days 15:44:45"
    assert leases[1].hostname == "Unknown"
    assert leases[1].lease_time == "1 days 02:00:00"



@rsps_lib.activate
def test_dhcp_hostnames_with_brackets(adapter: RouterAdapter) -> None:
    script = (
        'var tableData = [["1","host[1]","192.168.10.2","AA:BB:CC:00:11:22",'
        '"0" + "days " + "15:44:45"],'
        '["2","tv]","192.168.10.3","AA:BB:CC:00:11:33","1days 02:00:00"]];'
    )
    _serve(endpoints.DHCP_INFO, body=f"<html><script>{script}</script></html>")
    leases = adapter.get_dhcp_leases()
    assert [lease.hostname for lease in leases] == ["host[1]", "tv]"]


def test_normalize_lease_time() -> None:
    assert normalize_lease_time("0days 15:44:45") == "0 days 15:44:45"
    assert normalize_lease_time("3 day 00:00:01") == "3 days 00:00:01"
    assert normalize_lease_time("Infinite") == "Infinite"
    assert normalize_lease_time("") == UNKNOWN


@rsps_lib.activate
def test_connected_devices_join_on_mac(adapter: RouterAdapter) -> None:
    _serve(endpoints.ARP_TABLE, "arp.html")
    _serve(endpoints.DHCP_INFO, "dhcpinfo.html")
    devices = adapter.get_connected_devices()
    assert [(d.hostname, d.ip, d.lease_time) for d in devices] == [
        ("laptop", "192.168.10.2", "0 days 15:44:45"),
        ("Unknown", "192.168.10.3", "1 days 02:00:00"),
    ]


@rsps_lib.activate
def test_connected_device_without_lease(adapter: RouterAdapter) -> None:
    _serve(endpoints.ARP_TABLE, "arp.html")
    _serve(endpoints.DHCP_INFO, body="<html></html>")
    devices = adapter.get_connected_devices()
    assert devices[0].hostname == "Unknown"
    assert devices[0].lease_time == "Active"


@rsps_lib.activate
def test_wifi_status(adapter: RouterAdapter) -> None:
    _serve(endpoints.WIFI_STATUS, "status_wifi.html")
    wifi = adapter.get_wifi_status()
    assert wifi.ssid == "Home"
    assert wifi.channel == "6"
    assert wifi.security == "WPA2-PSK"
    assert wifi.client_count == 2
    assert [c.mac for c in wifi.clients] == ["AA:BB:CC:00:11:22", "AA:BB:CC:00:11:33"]


@rsps_lib.activate
def test_dsl_stats_dual_columns(adapter: RouterAdapter) -> None:
    _serve(endpoints.XDSL_STATUS, "xdsl.html")
    dsl = adapter.get_dsl_stats()
    assert dsl.line_state == "Showtime"
    assert dsl.modulation == "VDSL2"
    assert dsl.annex_mode == "ANNEX_B"
    assert (dsl.snr_margin_down, dsl.snr_margin_up) == ("12.3 dB", "8.1 dB")
    assert (dsl.attenuation_down, dsl.attenuation_up) == ("18.5 dB", "9.7 dB")
    assert (dsl.line_rate_down, dsl.line_rate_up) == ("24,576 kbps", "1,024 kbps")


@rsps_lib.activate
def test_system_and_security_logs(adapter: RouterAdapter) -> None:
    _serve(endpoints.SYSTEM_LOG, "status_log.html")
    _serve(endpoints.SECURITY_LOG, "status_log.html")
    system = adapter.get_system_log()
    assert [(e.level, e.message) for e in system] == [
        ("WARN", "PPP link down"),
        ("INFO", "PPP link up"),
        ("INFO", "DHCP lease renewed"),
    ]
    security = adapter.get_security_log()
    assert security[1].level == "SECURITY"


@rsps_lib.activate
def test_full_status_reads_four_pages(adapter: RouterAdapter) -> None:
    _serve(endpoints.DEVICE_INFO, "status_deviceinfo.html")
    _serve(endpoints.WAN_STATUS, "wan.html")
    _serve(endpoints.WIFI_STATUS, "status_wifi.html")
    _serve(endpoints.XDSL_STATUS, "xdsl.html")
    status = adapter.get_full_status()
    assert status.device.model == "PTCL-HG680"
    assert status.wan.wan_ip == "39.45.10.20"
    assert status.wifi.ssid == "Home"
    assert status.dsl.line_state == "Showtime"
    assert len(rsps_lib.calls) == 4


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@rsps_lib.activate
def test_lan_stats(adapter: RouterAdapter) -> None:
    _serve(endpoints.LAN_STATS, "statslan.html")
    stats = adapter.get_lan_stats()
    lan1 = stats.ports[0]
    assert lan1.port == "LAN1"
    assert lan1.status == "Up"
    assert lan1.bytes_received == 1234567
    assert lan1.packets_received == 4321
    assert lan1.bytes_sent == 7654321
    assert lan1.packets_sent == 8765
    assert stats.total_packets_sent == 8765
    assert stats.ports[1].port == "LAN2"


@rsps_lib.activate
def test_wlan_stats(adapter: RouterAdapter) -> None:
    _serve(endpoints.WLAN_STATS, "statswlan.html")
    stats = adapter.get_wlan_stats()
    assert stats.tx_frames == 10000
    assert stats.rx_frames == 20000
    assert stats.errors == 7
    assert stats.dropped == 11


@rsps_lib.activate
def test_adsl_stats(adapter: RouterAdapter) -> None:
    body = _table(
        ("Received Blocks", "1,000"),
        ("Transmitted Blocks", "900"),
        ("CRC Errors", "12"),
    )
    _serve(endpoints.ADSL_STATS, body=body)
    stats = adapter.get_adsl_stats()
    assert stats.received_blocks == 1000
    assert stats.transmitted_blocks == 900
    assert stats.crc_errors == 12
    assert stats.header_errors == 0


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@rsps_lib.activate
def test_lan_settings(adapter: RouterAdapter) -> None:
    _serve(endpoints.HOME_LAN, "home_lan.html")
    lan = adapter.get_lan_settings()
    assert lan.ip_address == "192.168.10.1"
    assert lan.subnet_mask == "255.255.255.0"
    assert lan.dhcp_enabled is True
    assert lan.dhcp_start_ip == "192.168.10.2"
    assert lan.dhcp_pool_size == 250
    assert lan.lease_time == "86400"
    assert lan.primary_dns == "203.82.48.3"


@rsps_lib.activate
def test_wireless_settings(adapter: RouterAdapter) -> None:
    _serve(endpoints.HOME_WIRELESS, "home_wireless.html")
    wifi = adapter.get_wireless_settings()
    assert wifi.enabled is True
    assert wifi.ssid == "Home"
    assert wifi.channel == "6"
    assert wifi.security == "WPA2-PSK"
    assert wifi.hidden is False


@rsps_lib.activate
def test_wan_services_defaults(adapter: RouterAdapter) -> None:
    body = _table(
        ("Service", "Protocol", "Status", "IP"),
        ("pppoe_0_35", "", "", ""),
        ("ipoe_8_35", "IPoE", "Up", "10.0.0.2", "8", "36"),
    )
    _serve(endpoints.HOME_WAN, body=body)
    services = adapter.get_wan_services()
    assert [(s.service_name, s.protocol, s.status, s.ip_address, s.vpi, s.vci) for s in services] == [
        ("pppoe_0_35", "PPPoE", "Unknown", UNKNOWN, "0", "35"),
        ("ipoe_8_35", "IPoE", "Up", "10.0.0.2", "8", "36"),
    ]


@rsps_lib.activate
def test_nat_rules(adapter: RouterAdapter) -> None:
    body = _table(
        ("Name", "Protocol", "External", "Internal", "Server", "Status"),
        ("web", "TCP", "8080", "80", "192.168.10.20", "Enabled"),
        ("game", "", "3074", "3074", "192.168.10.21", "Disabled"),
        ("ssh", "TCP", "2222", "22", "192.168.10.22"),
    )
    _serve(endpoints.NAT_TOP, body=body)
    rules = adapter.get_nat_rules()
    assert [(r.index, r.name, r.protocol, r.enabled) for r in rules] == [
        (0, "web", "TCP", True),
        (1, "game", "TCP", False),
        (2, "ssh", "TCP", True),
    ]
    assert rules[0].internal_ip == "192.168.10.20"


@rsps_lib.activate
def test_firewall_rules_and_settings(adapter: RouterAdapter) -> None:
    body = (
        '<html><body><input type="radio" name="firewallEnable" value="1" checked>'
        '<input type="radio" name="spiEnable" value="1">'
        + _table(
            ("Name", "Action", "Direction", "Protocol", "Source"),
            ("no-telnet", "Deny", "Inbound", "TCP", "*", "*", "23"),
            ("out-web", "Allow", "Outbound", "", "192.168.10.0"),
        )
        + "</body></html>"
    )
    _serve(endpoints.FIREWALL, body=body)
    rules = adapter.get_firewall_rules()
    assert [(r.name, r.action, r.direction, r.protocol, r.port) for r in rules] == [
        ("no-telnet", "deny", "inbound", "TCP", "23"),
        ("out-web", "allow", "outbound", "TCP", "*"),
    ]
    settings = adapter.get_firewall_settings()
    assert settings.firewall_enabled is True
    assert settings.spi_enabled is False
    assert settings.dos_protection is True


@rsps_lib.activate
def test_qos_settings(adapter: RouterAdapter) -> None:
    _serve(endpoints.QOS, "adv_qos.html")
    qos = adapter.get_qos_settings()
    assert qos.enabled is True
    assert qos.discipline == "WRR"
    assert qos.weights == (10, 5, 3, 1)
    assert qos.total_bandwidth == "20480"
    assert [(r.name, r.priority, r.protocol, r.port) for r in qos.rules] == [
        ("VoIP", "High", "UDP", "5060"),
        ("Gaming", "Medium", "TCP/UDP", "3074"),
    ]


@rsps_lib.activate
def test_qos_weights_default_when_absent(adapter: RouterAdapter) -> None:
    _serve(endpoints.QOS, body="<html></html>")
    assert adapter.get_qos_settings().weights == (8, 4, 2, 1)


@rsps_lib.activate
def test_ddns_settings(adapter: RouterAdapter) -> None:
    body = """
    <form>
      <input type="radio" name="Enable_DyDNS" value="Yes" checked>
      <input type="radio" name="Enable_DyDNS" value="No">
      <select name="ddns_ServerName"><option value="www.dyndns.org" selected>DynDNS</option></select>
      <input name="sysDNSHost" value="home.dyndns.org">
      <input name="sysDNSUser" value="me">
      <input type="radio" name="Enable_Wildcard" value="Yes">
    </form>
    """
    _serve(endpoints.DDNS, body=body)
    ddns = adapter.get_ddns_settings()
    assert ddns.enabled is True
    assert ddns.provider == "www.dyndns.org"
    assert ddns.hostname == "home.dyndns.org"
    assert ddns.username == "me"
    assert ddns.wildcard is False
    assert ddns.status == "Active"


@rsps_lib.activate
def test_parental_control_keeps_mac_rows(adapter: RouterAdapter) -> None:
    body = _table(
        ("MAC", "Days", "Start", "End"),
        ("AA:BB:CC:DD:EE:01", "Mon, Tue", "08:00", "17:00"),
        ("not-a-mac", "Sun", "00:00", "23:59"),
    )
    _serve(endpoints.PARENTAL, body=body)
    parental = adapter.get_parental_control()
    assert parental.enabled == UNKNOWN
    assert len(parental.rules) == 1
    assert parental.rules[0].days == ("Mon", "Tue")


@rsps_lib.activate
def test_upnp_status(adapter: RouterAdapter) -> None:
    body = _table(
        ("UPnP", "Enabled"),
        ("Description", "Protocol", "External", "Internal", "Client"),
        ("Xbox", "UDP", "3074", "3074", "192.168.10.30"),
    )
    _serve(endpoints.UPNP, body=body)
    upnp = adapter.get_upnp_status()
    assert upnp.enabled is True
    assert upnp.mappings[0].external_port == 3074
    assert upnp.mappings[0].internal_client == "192.168.10.30"


@rsps_lib.activate
def test_ip_filter_rules(adapter: RouterAdapter) -> None:
    _serve(endpoints.IP_FILTER, "access_ipfilter.html")
    rules = adapter.get_ip_filter_rules()
    assert [(r.name, r.action, r.protocol, r.port) for r in rules] == [
        ("block-cam", "deny", "TCP", "554"),
        ("dns-only", "allow", "All", "*"),
    ]


@rsps_lib.activate
def test_system_time(adapter: RouterAdapter) -> None:
    body = (
        _table(("Current Time", "2026-10-19 10:00:00"))
        + '<input name="timezone" value="GMT+05:00"><input name="ntpServer" value="pool.ntp.org">'
    )
    _serve(endpoints.TOOLS_TIME, body=body)
    clock = adapter.get_system_time()
    assert clock.current_time == "2026-10-19 10:00:00"
    assert clock.timezone == "GMT+05:00"
    assert clock.ntp_server == "pool.ntp.org"


@rsps_lib.activate
def test_routing_table(adapter: RouterAdapter) -> None:
    body = _table(
        ("Destination", "Gateway", "Netmask", "Interface", "Metric"),
        ("0.0.0.0", "39.45.10.1", "0.0.0.0", "ppp0", "1"),
        ("192.168.10.0", "0.0.0.0", "255.255.255.0", "br0"),
    )
    _serve(endpoints.ROUTING_TABLE, body=body)
    routes = adapter.get_routing_table()
    assert [(r.destination, r.interface, r.metric) for r in routes] == [
        ("0.0.0.0", "ppp0", 1),
        ("192.168.10.0", "br0", 0),
    ]


@rsps_lib.activate
def test_vpn_settings_default_status(adapter: RouterAdapter) -> None:
    _serve(endpoints.VPN, body='<input name="vpnType" value="PPTP">')
    vpn = adapter.get_vpn_settings()
    assert vpn.vpn_type == "PPTP"
    assert vpn.status == "Disconnected"


@rsps_lib.activate
def test_interface_groups(adapter: RouterAdapter) -> None:
    body = _table(
        ("Group", "LAN", "WAN"),
        ("Default", "LAN1, LAN2", "ppp1"),
        ("IPTV", "LAN4"),
    )
    _serve(endpoints.PORT_BINDING, body=body)
    groups = adapter.get_interface_groups()
    assert groups[0].lan_ports == ("LAN1", "LAN2")
    assert groups[0].wan_interface == "ppp1"
    assert groups[1].wan_interface == "ppp0"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

@rsps_lib.activate
def test_read_session_expired_propagates(adapter: RouterAdapter) -> None:
    rsps_lib.add(rsps_lib.GET, f"{BASE}{endpoints.DEVICE_INFO}", status=401)
    with pytest.raises(SessionExpiredError):
        adapter.get_device_info()
    assert len(rsps_lib.calls) == 1



@rsps_lib.activate
def test_read_login_redirect_is_not_followed(adapter: RouterAdapter) -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE}{endpoints.DEVICE_INFO}",
        status=302,
        headers={"Location": "/login.asp"},
    )
    with pytest.raises(SessionExpiredError):
        adapter.get_device_info()
    assert len(rsps_lib.calls) == 1


@rsps_lib.activate
def test_read_follows_console_redirect(adapter: RouterAdapter) -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE}{endpoints.DEVICE_INFO}",
        status=302,
        headers={"Location": "/cgi-bin/status_deviceinfo2.asp"},
    )
    _serve("/cgi-bin/status_deviceinfo2.asp", "status_deviceinfo.html")
    assert adapter.get_device_info().model == "PTCL-HG680"
    assert len(rsps_lib.calls) == 2


@rsps_lib.activate
def test_read_redirect_loop_is_a_transport_error(adapter: RouterAdapter) -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE}{endpoints.DEVICE_INFO}",
        status=302,
        headers={"Location": endpoints.DEVICE_INFO},
    )
    with pytest.raises(RouterResponseError):
        adapter.get_device_info()
    assert len(rsps_lib.calls) == 6


@rsps_lib.activate
def test_read_transport_error_propagates(adapter: RouterAdapter) -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE}{endpoints.DEVICE_INFO}",
        body=requests.exceptions.ConnectionError("unreachable"),
    )
    with pytest.raises(RouterRequestError):
        adapter.get_device_info()


def test_unknown_profile_rejected() -> None:
    with pytest.raises(ValueError):
        RouterAdapter(SESSION, profile="nonexistent")
