"""Typed read/write surface of one PTCL router console session."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping

from napalm_ptcl.client import filter_ops, lan_ops, nat_ops, qos_ops, system_ops, wan_ops, wifi_ops
from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.client.locks import session_lock
from napalm_ptcl.client.session import RouterSession
from napalm_ptcl.model.device import AdslStats, DeviceInfo, DslStats, WanChange, WanInfo, WanService
from napalm_ptcl.model.lan import (
    ArpEntry,
    ConnectedDevice,
    DhcpLease,
    LanChange,
    LanSettings,
    LanStats,
    PortStats,
)
from napalm_ptcl.model.qos import QosRule, QosRuleChange, QosSettings
from napalm_ptcl.model.result import OperationResult, WriteStage
from napalm_ptcl.model.security import (
    FirewallRule,
    FirewallSettings,
    IpFilterRule,
    MacFilterChange,
    NatRule,
    ParentalControl,
    ParentalRule,
    PortForwardRule,
    UpnpMapping,
    UpnpStatus,
)
from napalm_ptcl.model.system import (
    DdnsChange,
    DdnsSettings,
    FullStatus,
    InterfaceGroup,
    LogEntry,
    RoutingEntry,
    SystemTime,
    VpnSettings,
)
from napalm_ptcl.model.values import UNKNOWN
from napalm_ptcl.model.wireless import (
    WifiChange,
    WifiClient,
    WifiStatus,
    WirelessSettings,
    WlanStats,
)
from napalm_ptcl.parser.fields import PageDocument, extract_fields, parse_int
from napalm_ptcl.parser.forms import FormInventory
from napalm_ptcl.parser.script import parse_schema_rows, parse_script_list
from napalm_ptcl.parser.tables import parse_table_rows, parse_wifi_clients, parse_writeln_rows
from napalm_ptcl.utils import crawl
from napalm_ptcl.vendor.ptcl import endpoints
from napalm_ptcl.vendor.ptcl import fields as ptcl_fields
from napalm_ptcl.vendor.ptcl.firmware import get_profile
from napalm_ptcl.vendor.ptcl.mappings import ISP_CODE_TO_NAME

logger = logging.getLogger(__name__)

_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$")
_LEASE_RE = re.compile(r"^\s*(\d+)\s*days?\s*(.*)$", re.IGNORECASE)


def normalize_lease_time(raw: str) -> str:
    """Render a lease as ``"N days HH:MM:SS"``.

    The DHCP page builds it from concatenated pieces (``"0days 15:44:45"``).
    """
    m = _LEASE_RE.match(raw)
    if not m:
        return raw.strip() or UNKNOWN
    return f"{int(m.group(1))} days {m.group(2).strip()}".strip()


class RouterAdapter:
    """Reads and writes the PTCL console on behalf of one session.

    Reads fetch one page each under the session's shared lock and return
    frozen snapshots.  Writes follow read-merge-submit under the exclusive
    lock and return an :class:`.OperationResult`; every write accepts
    ``dry_run=True`` to report the planned field changes without posting.

    Args:
        session: Authenticated session.
        timeout_s: Per-request timeout in seconds (default 10).
        verify_tls: Whether to verify TLS certificates (default False).
        profile: Firmware profile name (default ``"default"``).
        lock_timeout_s: Give up waiting for the session lock after this many
            seconds (default: wait indefinitely).
        fetcher: Pre-built fetcher, mainly for tests.

    Raises:
        ValueError: If *profile* is unknown.
    """

    def __init__(
        self,
        session: RouterSession,
        *,
        timeout_s: float = endpoints.FETCH_TIMEOUT_S,
        verify_tls: bool = False,
        profile: str = "default",
        lock_timeout_s: float | None = None,
        fetcher: PageFetcher | None = None,
    ) -> None:
        self.session = session
        self.profile = get_profile(profile)
        self._fetcher = fetcher or PageFetcher(session, timeout_s=timeout_s, verify_tls=verify_tls)
        self._lock = session_lock(session)
        self._lock_timeout_s = lock_timeout_s

    def close(self) -> None:
        """Release the fetcher's connection pool."""
        self._fetcher.close()

    def __enter__(self) -> RouterAdapter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_device_info(self) -> DeviceInfo:
        doc = self._fetch(endpoints.DEVICE_INFO)
        return DeviceInfo(**extract_fields(doc, ptcl_fields.device_info_fields(self.profile)))

    def get_wan_info(self) -> WanInfo:
        """Summarise the first active, connected WAN service."""
        doc = self._fetch(endpoints.WAN_STATUS)
        values = extract_fields(doc, ptcl_fields.wan_info_fields(self.profile))
        isp = values.pop("isp")
        return WanInfo(
            connection_status="Connected" if values["wan_ip"] != UNKNOWN else UNKNOWN,
            connection_type=ISP_CODE_TO_NAME.get(isp, UNKNOWN),
            **values,
        )

    def get_arp_table(self) -> list[ArpEntry]:
        raw = self._fetch(endpoints.ARP_TABLE).raw
        ips = parse_script_list(raw, self.profile.arp_ip)
        macs = parse_script_list(raw, self.profile.arp_mac)
        devices = parse_script_list(raw, self.profile.arp_device)
        entries: list[ArpEntry] = []
        for i, ip in enumerate(ips):
            if ip == UNKNOWN:
                continue
            entries.append(
                ArpEntry(
                    ip=ip,
                    mac=macs[i] if i < len(macs) else UNKNOWN,
                    interface=devices[i] if i < len(devices) else "br0",
                )
            )
        return entries

    def get_dhcp_leases(self) -> list[DhcpLease]:
        raw = self._fetch(endpoints.DHCP_INFO).raw
        leases: list[DhcpLease] = []
        for row in parse_schema_rows(raw, self.profile.dhcp_leases):
            if not row["ip"] or row["ip"] == UNKNOWN:
                continue
            leases.append(
                DhcpLease(
                    hostname=row["hostname"] or "Unknown",
                    ip=row["ip"],
                    mac=row["mac"],
                    lease_time=normalize_lease_time(row["expires"]),
                )
            )
        return leases

    def get_connected_devices(self) -> list[ConnectedDevice]:
        """ARP entries joined with DHCP leases on MAC (case-insensitive)."""
        arp = self.get_arp_table()
        by_mac = {lease.mac.lower(): lease for lease in self.get_dhcp_leases()}
        devices: list[ConnectedDevice] = []
        for entry in arp:
            lease = by_mac.get(entry.mac.lower())
            devices.append(
                ConnectedDevice(
                    hostname=lease.hostname if lease else "Unknown",
                    ip=entry.ip,
                    mac=entry.mac,
                    interface=entry.interface,
                    lease_time=lease.lease_time if lease else "Active",
                )
            )
        return devices

    def get_wifi_status(self) -> WifiStatus:
        doc = self._fetch(endpoints.WIFI_STATUS)
        values = extract_fields(doc, ptcl_fields.WIFI_STATUS_FIELDS)
        count, macs = parse_wifi_clients(doc.raw)
        return WifiStatus(
            client_count=count,
            clients=tuple(WifiClient(mac=mac) for mac in macs),
            **values,
        )

    def get_dsl_stats(self) -> DslStats:
        doc = self._fetch(endpoints.XDSL_STATUS)
        return DslStats(**extract_fields(doc, ptcl_fields.DSL_STATS_FIELDS))

    def get_system_log(self) -> list[LogEntry]:
        return self._read_log(endpoints.SYSTEM_LOG, "INFO")

    def get_security_log(self) -> list[LogEntry]:
        return self._read_log(endpoints.SECURITY_LOG, "SECURITY")

    def get_full_status(self) -> FullStatus:
        """Device, WAN, wireless and DSL status in one call (four reads)."""
        return FullStatus(
            device=self.get_device_info(),
            wan=self.get_wan_info(),
            wifi=self.get_wifi_status(),
            dsl=self.get_dsl_stats(),
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_lan_stats(self) -> LanStats:
        raw = self._fetch(endpoints.LAN_STATS).raw
        ports: list[PortStats] = []
        for port, values in parse_writeln_rows(raw):
            if len(values) < 5:
                continue
            # status, rx bytes, rx packets, tx bytes, tx packets
            ports.append(
                PortStats(
                    port=port,
                    status=values[0],
                    bytes_received=parse_int(values[1]),
                    packets_received=parse_int(values[2]),
                    bytes_sent=parse_int(values[3]),
                    packets_sent=parse_int(values[4]),
                )
            )
        return LanStats(ports=tuple(ports))

    def get_wlan_stats(self) -> WlanStats:
        doc = self._fetch(endpoints.WLAN_STATS)
        return WlanStats(**extract_fields(doc, ptcl_fields.WLAN_STATS_FIELDS))

    def get_adsl_stats(self) -> AdslStats:
        doc = self._fetch(endpoints.ADSL_STATS)
        return AdslStats(**extract_fields(doc, ptcl_fields.ADSL_STATS_FIELDS))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_lan_settings(self) -> LanSettings:
        doc = self._fetch(endpoints.HOME_LAN)
        return LanSettings(**extract_fields(doc, ptcl_fields.LAN_SETTINGS_FIELDS))

    def get_wan_services(self) -> list[WanService]:
        doc = self._fetch(endpoints.HOME_WAN)
        return [
            WanService(
                service_name=cols[0],
                protocol=cols[1] or "PPPoE",
                status=cols[2] or "Unknown",
                ip_address=cols[3] or UNKNOWN,
                vpi=_col(cols, 4) or "0",
                vci=_col(cols, 5) or "35",
            )
            for cols in parse_table_rows(doc, 4, header_words=("service",))
        ]

    def get_wireless_settings(self) -> WirelessSettings:
        doc = self._fetch(endpoints.HOME_WIRELESS)
        return WirelessSettings(**extract_fields(doc, ptcl_fields.WIRELESS_SETTINGS_FIELDS))

    def get_nat_rules(self) -> list[NatRule]:
        doc = self._fetch(endpoints.NAT_TOP)
        return [
            NatRule(
                index=i,
                name=cols[0],
                protocol=cols[1] or "TCP",
                external_port=cols[2],
                internal_port=cols[3],
                internal_ip=cols[4],
                enabled=_col(cols, 5).lower() != "disabled",
            )
            for i, cols in enumerate(parse_table_rows(doc, 5, header_words=("name",)))
        ]

    def get_firewall_rules(self) -> list[FirewallRule]:
        doc = self._fetch(endpoints.FIREWALL)
        return [
            FirewallRule(
                name=cols[0],
                action="deny" if cols[1].lower() == "deny" else "allow",
                direction="outbound" if "out" in cols[2].lower() else "inbound",
                protocol=cols[3] or "TCP",
                source_ip=cols[4],
                dest_ip=_col(cols, 5) or "*",
                port=_col(cols, 6) or "*",
            )
            for cols in parse_table_rows(doc, 5, header_words=("name",))
        ]

    def get_firewall_settings(self) -> FirewallSettings:
        doc = self._fetch(endpoints.FIREWALL)
        values = extract_fields(doc, ptcl_fields.FIREWALL_SETTINGS_FIELDS)
        # The console has no separate DoS switch; it follows the firewall.
        return FirewallSettings(dos_protection=values["firewall_enabled"], **values)

    def get_qos_settings(self) -> QosSettings:
        doc = self._fetch(endpoints.QOS)
        values = extract_fields(doc, ptcl_fields.QOS_SETTINGS_FIELDS)
        rules = tuple(
            QosRule(name=cols[0], priority=cols[1], protocol=cols[2], port=cols[3])
            for cols in parse_table_rows(doc, 4, header_words=("rule", "name"))
        )
        return QosSettings(
            enabled=values["enabled"],
            total_bandwidth=values["total_bandwidth"],
            discipline=values["discipline"],
            weights=(values["weight1"], values["weight2"], values["weight3"], values["weight4"]),
            rules=rules,
        )

    def get_ddns_settings(self) -> DdnsSettings:
        doc = self._fetch(endpoints.DDNS)
        values = extract_fields(doc, ptcl_fields.DDNS_SETTINGS_FIELDS)
        return DdnsSettings(status="Active" if values["enabled"] is True else "Inactive", **values)

    def get_parental_control(self) -> ParentalControl:
        doc = self._fetch(endpoints.PARENTAL)
        values = extract_fields(doc, ptcl_fields.PARENTAL_FIELDS)
        rules = tuple(
            ParentalRule(
                mac=cols[0],
                days=tuple(d.strip() for d in cols[1].split(",") if d.strip()),
                start_time=cols[2],
                end_time=cols[3],
            )
            for cols in parse_table_rows(doc, 4, header_words=())
            if _MAC_RE.match(cols[0])
        )
        return ParentalControl(enabled=values["enabled"], rules=rules)

    def get_upnp_status(self) -> UpnpStatus:
        doc = self._fetch(endpoints.UPNP)
        values = extract_fields(doc, ptcl_fields.UPNP_FIELDS)
        mappings = tuple(
            UpnpMapping(
                description=cols[0],
                protocol=cols[1] or "TCP",
                external_port=parse_int(cols[2]),
                internal_port=parse_int(cols[3]),
                internal_client=_col(cols, 4),
            )
            for cols in parse_table_rows(doc, 4, header_words=("description",))
        )
        return UpnpStatus(enabled=values["enabled"], mappings=mappings)

    def get_ip_filter_rules(self) -> list[IpFilterRule]:
        doc = self._fetch(endpoints.IP_FILTER)
        return [
            IpFilterRule(
                name=cols[0],
                action="deny" if cols[1].lower() == "deny" else "allow",
                source_ip=cols[2],
                dest_ip=cols[3],
                protocol=_col(cols, 4) or "All",
                port=_col(cols, 5) or "*",
            )
            for cols in parse_table_rows(doc, 4, header_words=("name",))
        ]

    def get_system_time(self) -> SystemTime:
        doc = self._fetch(endpoints.TOOLS_TIME)
        return SystemTime(**extract_fields(doc, ptcl_fields.SYSTEM_TIME_FIELDS))

    def get_routing_table(self) -> list[RoutingEntry]:
        doc = self._fetch(endpoints.ROUTING_TABLE)
        return [
            RoutingEntry(
                destination=cols[0],
                gateway=cols[1],
                netmask=cols[2],
                interface=cols[3],
                metric=parse_int(_col(cols, 4)),
            )
            for cols in parse_table_rows(doc, 4, header_words=("destination",))
        ]

    def get_vpn_settings(self) -> VpnSettings:
        doc = self._fetch(endpoints.VPN)
        return VpnSettings(**extract_fields(doc, ptcl_fields.VPN_SETTINGS_FIELDS))

    def get_interface_groups(self) -> list[InterfaceGroup]:
        doc = self._fetch(endpoints.PORT_BINDING)
        return [
            InterfaceGroup(
                name=cols[0],
                lan_ports=tuple(p.strip() for p in cols[1].split(",") if p.strip()),
                wan_interface=_col(cols, 2) or "ppp0",
            )
            for cols in parse_table_rows(doc, 2, header_words=("group",))
        ]

    # ------------------------------------------------------------------
    # Writes: wireless
    # ------------------------------------------------------------------

    def set_wifi_settings(self, change: WifiChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: wifi_ops.set_wifi_settings(self._fetcher, change, dry_run=dry_run))

    def set_wifi_enabled(self, enabled: bool, *, dry_run: bool = False) -> OperationResult:
        return self.set_wifi_settings(WifiChange(enabled=enabled), dry_run=dry_run)

    def set_wifi_ssid(self, ssid: str, *, dry_run: bool = False) -> OperationResult:
        return self.set_wifi_settings(WifiChange(ssid=ssid), dry_run=dry_run)

    def set_wifi_password(self, password: str, *, dry_run: bool = False) -> OperationResult:
        return self.set_wifi_settings(WifiChange(password=password), dry_run=dry_run)

    def set_wifi_channel(self, channel: int, *, dry_run: bool = False) -> OperationResult:
        return self.set_wifi_settings(WifiChange(channel=channel), dry_run=dry_run)

    # ------------------------------------------------------------------
    # Writes: LAN / WAN
    # ------------------------------------------------------------------

    def set_lan_settings(self, change: LanChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: lan_ops.set_lan_settings(self._fetcher, change, dry_run=dry_run))

    def set_lan_ip_address(self, ip_address: str, *, dry_run: bool = False) -> OperationResult:
        return self.set_lan_settings(LanChange(ip_address=ip_address), dry_run=dry_run)

    def set_dhcp_enabled(self, enabled: bool, *, dry_run: bool = False) -> OperationResult:
        return self.set_lan_settings(LanChange(dhcp_enabled=enabled), dry_run=dry_run)

    def set_dhcp_pool(
        self,
        start_ip: str,
        pool_size: int,
        lease_time: int | None = None,
        *,
        dry_run: bool = False,
    ) -> OperationResult:
        change = LanChange(
            dhcp_start_ip=start_ip,
            dhcp_pool_size=pool_size,
            dhcp_lease_time=lease_time,
        )
        return self.set_lan_settings(change, dry_run=dry_run)

    def set_wan_settings(self, change: WanChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: wan_ops.set_wan_settings(self._fetcher, change, dry_run=dry_run))

    def set_pppoe_credentials(
        self, username: str, password: str, *, dry_run: bool = False
    ) -> OperationResult:
        change = WanChange(ppp_username=username, ppp_password=password)
        return self.set_wan_settings(change, dry_run=dry_run)

    def set_nat_enabled(self, enabled: bool, *, dry_run: bool = False) -> OperationResult:
        return self.set_wan_settings(WanChange(nat_enabled=enabled), dry_run=dry_run)

    # ------------------------------------------------------------------
    # Writes: NAT / filtering / QoS
    # ------------------------------------------------------------------

    def add_port_forwarding_rule(
        self, rule: PortForwardRule, *, dry_run: bool = False
    ) -> OperationResult:
        return self._write(
            lambda: nat_ops.add_port_forwarding_rule(self._fetcher, rule, dry_run=dry_run)
        )

    def delete_port_forwarding_rule(
        self, rule_index: int, *, dry_run: bool = False
    ) -> OperationResult:
        return self._write(
            lambda: nat_ops.delete_port_forwarding_rule(self._fetcher, rule_index, dry_run=dry_run)
        )

    def set_mac_filter(self, change: MacFilterChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(
            lambda: filter_ops.set_mac_filter(self._fetcher, change, dry_run=dry_run)
        )

    def block_device(self, mac_address: str, *, dry_run: bool = False) -> OperationResult:
        return self.set_mac_filter(MacFilterChange(mac_address, action="block"), dry_run=dry_run)

    def allow_device(self, mac_address: str, *, dry_run: bool = False) -> OperationResult:
        return self.set_mac_filter(MacFilterChange(mac_address, action="allow"), dry_run=dry_run)

    def delete_mac_filter(self, rule_index: int, *, dry_run: bool = False) -> OperationResult:
        return self._write(
            lambda: filter_ops.delete_mac_filter(self._fetcher, rule_index, dry_run=dry_run)
        )

    def set_qos_enabled(self, enabled: bool, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: qos_ops.set_qos_enabled(self._fetcher, enabled, dry_run=dry_run))

    def set_qos_discipline(
        self,
        discipline: str,
        weights: Mapping[str, int] | None = None,
        *,
        dry_run: bool = False,
    ) -> OperationResult:
        return self._write(
            lambda: qos_ops.set_qos_discipline(
                self._fetcher, discipline, weights, dry_run=dry_run
            )
        )

    def add_qos_rule(self, change: QosRuleChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: qos_ops.add_qos_rule(self._fetcher, change, dry_run=dry_run))

    def delete_qos_rule(self, rule_index: int, *, dry_run: bool = False) -> OperationResult:
        return self._write(
            lambda: qos_ops.delete_qos_rule(self._fetcher, rule_index, dry_run=dry_run)
        )

    # ------------------------------------------------------------------
    # Writes: maintenance
    # ------------------------------------------------------------------

    def set_admin_password(self, password: str, *, dry_run: bool = False) -> OperationResult:
        return self._write(
            lambda: system_ops.set_admin_password(self._fetcher, password, dry_run=dry_run)
        )

    def set_ddns_settings(self, change: DdnsChange, *, dry_run: bool = False) -> OperationResult:
        return self._write(
            lambda: system_ops.set_ddns_settings(self._fetcher, change, dry_run=dry_run)
        )

    def enable_ddns(
        self,
        provider: str,
        hostname: str,
        username: str,
        password: str,
        *,
        dry_run: bool = False,
    ) -> OperationResult:
        change = DdnsChange(
            enabled=True,
            provider=provider,
            hostname=hostname,
            username=username,
            password=password,
        )
        return self.set_ddns_settings(change, dry_run=dry_run)

    def disable_ddns(self, *, dry_run: bool = False) -> OperationResult:
        return self.set_ddns_settings(DdnsChange(enabled=False), dry_run=dry_run)

    def restart(self, *, dry_run: bool = False) -> OperationResult:
        return self._write(lambda: system_ops.restart(self._fetcher, dry_run=dry_run))

    # ------------------------------------------------------------------
    # Survey
    # ------------------------------------------------------------------

    def discover_pages(self, start_path: str = endpoints.ROOT, max_depth: int = 2) -> list[str]:
        """Crawl the console menu and return every linked path."""
        with self._lock.read(timeout=self._lock_timeout_s):
            return crawl.discover_links(self._fetcher, start_path, max_depth)

    def inventory_forms(
        self, pages: Iterable[str] = endpoints.SETTINGS_PAGES
    ) -> dict[str, list[FormInventory]]:
        """Record every form and field on *pages*."""
        with self._lock.read(timeout=self._lock_timeout_s):
            return crawl.collect_form_inventory(self._fetcher, pages)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetch(self, path: str) -> PageDocument:
        with self._lock.read(timeout=self._lock_timeout_s):
            return PageDocument(self._fetcher.fetch(path))

    def _read_log(self, path: str, default_level: str) -> list[LogEntry]:
        doc = self._fetch(path)
        entries: list[LogEntry] = []
        for cols in parse_table_rows(doc, 2, header_words=("time", "date")):
            if len(cols) >= 3:
                level, message = cols[1] or default_level, cols[2] or cols[1]
            else:
                level, message = default_level, cols[1]
            entries.append(LogEntry(timestamp=cols[0], level=level, message=message))
        return entries

    def _write(self, operation: Callable[[], OperationResult]) -> OperationResult:
        try:
            with self._lock.write(timeout=self._lock_timeout_s):
                return operation()
        except TimeoutError:
            logger.debug("Session lock busy for %s", self.session.base_url)
            return OperationResult.failed(
                "Another operation is in progress on this session; try again",
                WriteStage.IDLE,
            )


def _col(cols: list[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""
