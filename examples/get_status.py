#!/usr/bin/env python3
"""Print the router's device, WAN, WiFi and DSL status plus connected hosts.

Usage::

    PTCL_HOST=192.168.10.1 PTCL_PASSWORD=secret python examples/get_status.py

Environment variables:
    PTCL_HOST        Router IP or URL (required).
    PTCL_USERNAME    Login username (default: admin).
    PTCL_PASSWORD    Login password (required).
    PTCL_VERIFY_TLS  Set to "true" to verify TLS certificates (default: false).
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys

from napalm_ptcl.client.errors import RouterError
from napalm_ptcl.driver import PTCLDriver

host = os.environ.get("PTCL_HOST", "")
password = os.environ.get("PTCL_PASSWORD", "")
if not host or not password:
    print("ERROR: PTCL_HOST and PTCL_PASSWORD are required.", file=sys.stderr)
    sys.exit(1)

username = os.environ.get("PTCL_USERNAME", "admin")
verify_tls = os.environ.get("PTCL_VERIFY_TLS", "false").lower() == "true"
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

driver = PTCLDriver(
    hostname=host,
    username=username,
    password=password,
    optional_args={"verify_tls": verify_tls},
)

try:
    driver.open()
    status = driver.adapter.get_full_status()
    devices = driver.adapter.get_connected_devices()
except RouterError as exc:
    print(f"ERROR: {exc}", file=sys.stderr)
    sys.exit(1)
finally:
    driver.close()

print(json.dumps(dataclasses.asdict(status), indent=2))
print()
print(f"{'IP':<16} {'MAC':<18} {'HOSTNAME':<24} LEASE")
for device in devices:
    print(f"{device.ip:<16} {device.mac:<18} {device.hostname:<24} {device.lease_time}")
