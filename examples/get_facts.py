#!/usr/bin/env python3
"""Smoke-test script: retrieve NAPALM facts from a PTCL router.

Usage::

    export PTCL_HOST="http://192.168.10.1"
    export PTCL_USERNAME="admin"
    export PTCL_PASSWORD="your-password"
    export PTCL_VERIFY_TLS="false"   # optional, default false
    python examples/get_facts.py

Exit codes:
    0 — facts retrieved and printed successfully.
    1 — missing environment variable or driver error.
"""

from __future__ import annotations

import json
import logging
import os
import sys


def _env(name: str, default: str | None = None) -> str:
    value = os.environ.get(name, default)
    if value is None:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def main() -> None:
    host = _env("PTCL_HOST")
    username = _env("PTCL_USERNAME", "admin")
    password = _env("PTCL_PASSWORD")
    verify_tls_raw = os.environ.get("PTCL_VERIFY_TLS", "false").lower()
    verify_tls = verify_tls_raw not in {"0", "false", "no", "off"}
    logging.basicConfig(level=os.environ.get("PTCL_LOG_LEVEL", "WARNING"))

    # Import here so import errors surface after env var check.
    from napalm_ptcl.driver import PTCLDriver

    driver = PTCLDriver(
        hostname=host,
        username=username,
        password=password,
        optional_args={"verify_tls": verify_tls},
    )

    try:
        driver.open()
        facts = driver.get_facts()
        counters = driver.get_interfaces_counters()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps({"facts": facts, "counters": counters}, indent=2))


if __name__ == "__main__":
    main()
