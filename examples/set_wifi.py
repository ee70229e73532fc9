#!/usr/bin/env python3
"""Example: change the WiFi SSID and/or channel of a PTCL router.

Every write re-submits the whole wireless form, so all settings not named
here are sent back unchanged.  The script always shows a dry run first.

Usage (dry run, default):

    PTCL_HOST=192.168.10.1 PTCL_PASSWORD=secret WIFI_SSID=Home5 python examples/set_wifi.py

Usage (live apply):

    APPLY=1 PTCL_HOST=192.168.10.1 PTCL_PASSWORD=secret WIFI_CHANNEL=11 \
        python examples/set_wifi.py

Environment variables:
    PTCL_HOST        Router IP or URL (required).
    PTCL_USERNAME    Login username (default: admin).
    PTCL_PASSWORD    Login password (required).
    PTCL_VERIFY_TLS  Set to "true" to verify TLS certificates (default: false).
    WIFI_SSID        New network name (optional).
    WIFI_CHANNEL     New channel, 0 for auto (optional).
    APPLY            Set to "1" to actually apply changes (default: dry-run).
"""

from __future__ import annotations

import logging
import os
import sys

from napalm_ptcl.driver import PTCLDriver
from napalm_ptcl.model.wireless import WifiChange

# ---------------------------------------------------------------------------
# Read configuration from environment
# ---------------------------------------------------------------------------
host = os.environ.get("PTCL_HOST", "")
password = os.environ.get("PTCL_PASSWORD", "")
if not host or not password:
    print("ERROR: PTCL_HOST and PTCL_PASSWORD are required.", file=sys.stderr)
    sys.exit(1)

username = os.environ.get("PTCL_USERNAME", "admin")
verify_tls = os.environ.get("PTCL_VERIFY_TLS", "false").lower() == "true"
apply_changes = os.environ.get("APPLY", "0") == "1"
channel_raw = os.environ.get("WIFI_CHANNEL")
change = WifiChange(
    ssid=os.environ.get("WIFI_SSID"),
    channel=int(channel_raw) if channel_raw else None,
)
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

print(f"Target router : {host}")
print(f"Apply changes : {apply_changes}")
print()

driver = PTCLDriver(
    hostname=host,
    username=username,
    password=password,
    optional_args={"verify_tls": verify_tls, "lock_timeout_s": 30},
)

try:
    driver.open()

    print("=== DRY RUN ===")
    plan = driver.adapter.set_wifi_settings(change, dry_run=True)
    print(f"  {plan.message}")
    for field, (old, new) in sorted(plan.changes.items()):
        print(f"  {field}: {old!r} -> {new!r}")
    print()

    if not plan.success or not apply_changes:
        print("Dry-run only -- set APPLY=1 to apply changes.")
        sys.exit(0 if plan.success else 1)

    print("=== APPLYING ===")
    result = driver.adapter.set_wifi_settings(change)
    print(f"  {result.message} (stage: {result.stage.value})")
    sys.exit(0 if result.success else 1)

except Exception as exc:  # noqa: BLE001
    print(f"ERROR: {exc}", file=sys.stderr)
    sys.exit(1)
finally:
    driver.close()
