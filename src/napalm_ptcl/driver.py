"""PTCL NAPALM driver — top-level NetworkDriver implementation."""

from __future__ import annotations

import logging
from typing import Any

from napalm.base.base import NetworkDriver

from napalm_ptcl.adapter import RouterAdapter
from napalm_ptcl.client.errors import RouterError
from napalm_ptcl.client.session import RouterCredentials, SessionManager
from napalm_ptcl.model.values import UNKNOWN
from napalm_ptcl.parser.fields import parse_uptime_seconds

logger = logging.getLogger(__name__)

_VENDOR: str = "PTCL"
_WLAN_INTERFACE: str = "wlan0"


class PTCLDriver(NetworkDriver):  # type: ignore[misc]
    """NAPALM driver for PTCL-branded DSL routers.

    Talks to the router's web console over HTTP.  The typed read/write
    surface lives on :attr:`adapter`; the NAPALM getters are built on it.

    Args:
        hostname: IP address or hostname of the router, optionally including
            the URL scheme (e.g. ``http://192.168.10.1``).
        username: Console username.
        password: Console password.
        timeout: Per-request timeout in seconds.
        optional_args: Optional driver configuration overrides.
            Supported keys:

            - ``port`` (int): HTTP port (default 80; 443 when verify_tls=True).
            - ``verify_tls`` (bool): Verify TLS certificates (default ``False``).
            - ``firmware_profile`` (str): Script-array profile (default
              ``"default"``).
            - ``lock_timeout_s`` (float): Give up on a busy session after this
              many seconds (default: wait).
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        timeout: int = 10,
        optional_args: dict[str, Any] | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.optional_args: dict[str, Any] = optional_args or {}

        self._verify_tls: bool = bool(self.optional_args.get("verify_tls", False))
        self._port: int = int(
            self.optional_args.get(
                "port",
                443 if self._verify_tls else 80,
            )
        )
        self._profile: str = str(self.optional_args.get("firmware_profile", "default"))
        lock_timeout = self.optional_args.get("lock_timeout_s")
        self._lock_timeout_s: float | None = (
            float(lock_timeout) if lock_timeout is not None else None
        )
        self._manager = SessionManager(verify_tls=self._verify_tls)
        self._adapter: RouterAdapter | None = None
        logger.debug(
            "PTCLDriver initialised: host=%s port=%d user=%s",
            self.hostname,
            self._port,
            self.username,
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Authenticate with the router and build the adapter.

        Raises:
            InvalidCredentialsError: If the router rejects the login.
            TransportError: If the router cannot be reached.
        """
        base_url = self._build_base_url()
        logger.info("Opening connection to %s", base_url)
        creds = RouterCredentials(host=base_url, username=self.username, password=self.password)
        session = self._manager.authenticate(creds)
        self._adapter = RouterAdapter(
            session,
            timeout_s=float(self.timeout),
            verify_tls=self._verify_tls,
            profile=self._profile,
            lock_timeout_s=self._lock_timeout_s,
        )

    def close(self) -> None:
        """Drop the session and its connection pool (best-effort; never raises)."""
        if self._adapter is not None:
            logger.info("Closing connection to %s", self.hostname)
            try:
                self._adapter.close()
            except Exception:  # noqa: BLE001
                logger.debug("Adapter close failed (ignored)", exc_info=True)
            finally:
                self._adapter = None
        self._manager.invalidate()

    def is_alive(self) -> dict[str, bool]:
        """Return whether the router still accepts the session."""
        if self._adapter is None:
            return {"is_alive": False}
        return {"is_alive": self._manager.validate()}

    @property
    def adapter(self) -> RouterAdapter:
        """The typed read/write surface of the open session."""
        return self._require_adapter()

    # ------------------------------------------------------------------
    # NAPALM getters
    # ------------------------------------------------------------------

    def get_facts(self) -> dict[str, Any]:
        """Return general device facts conforming to the NAPALM schema.

        Returns:
            A dict with keys: ``hostname``, ``fqdn``, ``vendor``, ``model``,
            ``serial_number``, ``os_version``, ``uptime``, ``interface_list``.
        """
        adapter = self._require_adapter()
        info = adapter.get_device_info()
        ports = adapter.get_lan_stats().ports

        # Prefer the LAN address from the page; fall back to the configured hostname.
        hostname = info.lan_ip if info.lan_ip != UNKNOWN else self.hostname

        return {
            "hostname": hostname,
            "fqdn": hostname,
            "vendor": _VENDOR,
            "model": info.model if info.model != UNKNOWN else "unknown",
            "serial_number": info.serial_number if info.serial_number != UNKNOWN else "",
            "os_version": info.firmware_version if info.firmware_version != UNKNOWN else "",
            "uptime": parse_uptime_seconds(info.uptime),
            "interface_list": [p.port for p in ports] + [_WLAN_INTERFACE],
        }

    def get_arp_table(self, vrf: str = "") -> list[dict[str, Any]]:
        """Return the ARP table conforming to the NAPALM schema.

        The console shows no entry age, so ``age`` is always ``-1.0``.
        """
        return [
            {
                "interface": entry.interface,
                "mac": entry.mac.upper(),
                "ip": entry.ip,
                "age": -1.0,
            }
            for entry in self._require_adapter().get_arp_table()
        ]

    def get_interfaces_counters(self) -> dict[str, dict[str, int]]:
        """Return per-interface counters for the LAN ports and the radio.

        Counters the console does not report are ``-1``.
        """
        adapter = self._require_adapter()
        counters: dict[str, dict[str, int]] = {}
        for port in adapter.get_lan_stats().ports:
            counters[port.port] = _counters(
                tx_octets=port.bytes_sent,
                rx_octets=port.bytes_received,
                tx_packets=port.packets_sent,
                rx_packets=port.packets_received,
            )
        wlan = adapter.get_wlan_stats()
        counters[_WLAN_INTERFACE] = _counters(
            tx_packets=wlan.tx_frames,
            rx_packets=wlan.rx_frames,
            tx_errors=wlan.tx_errors,
            rx_errors=wlan.rx_errors,
            tx_discards=wlan.tx_dropped,
            rx_discards=wlan.rx_dropped,
        )
        return counters

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_base_url(self) -> str:
        """Construct the router base URL from hostname / port / TLS settings."""
        if "://" in self.hostname:
            return self.hostname.rstrip("/")
        scheme = "https" if self._verify_tls else "http"
        default_port = 443 if self._verify_tls else 80
        if self._port == default_port:
            return f"{scheme}://{self.hostname}"
        return f"{scheme}://{self.hostname}:{self._port}"

    def _require_adapter(self) -> RouterAdapter:
        """Return the open adapter or raise :exc:`.RouterError`."""
        if self._adapter is None:
            raise RouterError("Session not open; call open() first.")
        return self._adapter


def _counters(
    *,
    tx_octets: int = -1,
    rx_octets: int = -1,
    tx_packets: int = -1,
    rx_packets: int = -1,
    tx_errors: int = -1,
    rx_errors: int = -1,
    tx_discards: int = -1,
    rx_discards: int = -1,
) -> dict[str, int]:
    return {
        "tx_errors": tx_errors,
        "rx_errors": rx_errors,
        "tx_discards": tx_discards,
        "rx_discards": rx_discards,
        "tx_octets": tx_octets,
        "rx_octets": rx_octets,
        "tx_unicast_packets": tx_packets,
        "rx_unicast_packets": rx_packets,
        "tx_multicast_packets": -1,
        "rx_multicast_packets": -1,
        "tx_broadcast_packets": -1,
        "rx_broadcast_packets": -1,
    }
