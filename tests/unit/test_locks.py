"""Unit tests for napalm_ptcl.client.locks and write serialisation."""

from __future__ import annotations

import gc
import threading
import time
from urllib.parse import parse_qsl

import pytest
import requests
import responses as responses_lib

from napalm_ptcl.adapter import RouterAdapter
from napalm_ptcl.client import locks
from napalm_ptcl.client.locks import ReadWriteLock, session_lock
from napalm_ptcl.client.session import RouterSession, SessionManager
from napalm_ptcl.model.result import OperationResult
from napalm_ptcl.vendor.ptcl import endpoints

_BASE = "http://192.168.10.1"


# ---------------------------------------------------------------------------
# ReadWriteLock
# ---------------------------------------------------------------------------

class TestReadWriteLock:
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        with lock.read(), lock.read(timeout=0.05):
            pass

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        with lock.write():
            with pytest.raises(TimeoutError):
                with lock.read(timeout=0.05):
                    pass

    def test_reader_excludes_writer(self) -> None:
        lock = ReadWriteLock()
        with lock.read():
            with pytest.raises(TimeoutError):
                with lock.write(timeout=0.05):
                    pass

    def test_released_after_timeout(self) -> None:
        lock = ReadWriteLock()
        with lock.read():
            with pytest.raises(TimeoutError):
                with lock.write(timeout=0.01):
                    pass
        with lock.write(timeout=0.05), pytest.raises(TimeoutError):
            with lock.write(timeout=0.01):
                pass
        with lock.read(timeout=0.05):
            pass

    def test_released_on_exception(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            with lock.write():
                raise RuntimeError("boom")
        with lock.write(timeout=0.05):
            pass

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        writer_waiting = threading.Event()
        writer_done = threading.Event()

        def writer() -> None:
            writer_waiting.set()
            with lock.write(timeout=2):
                writer_done.set()

        with lock.read():
            thread = threading.Thread(target=writer)
            thread.start()
            writer_waiting.wait(1)
            time.sleep(0.05)
            with pytest.raises(TimeoutError):
                with lock.read(timeout=0.05):
                    pass
        thread.join(2)
        assert writer_done.is_set()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_equal_sessions_share_one_lock() -> None:
    a = RouterSession(host="192.168.10.1", session_id="reg01")
    b = RouterSession(host="http://192.168.10.1/", session_id="reg01")
    c = RouterSession(host="192.168.10.1", session_id="reg02")
    lock_a = session_lock(a)
    lock_c = session_lock(c)
    assert session_lock(b) is lock_a
    assert lock_c is not lock_a


def test_unused_lock_leaves_the_registry() -> None:
    session = RouterSession(host="192.168.10.1", session_id="reg03")
    adapter = RouterAdapter(session)
    assert ("http://192.168.10.1", "reg03") in locks._registry
    del adapter
    gc.collect()
    assert ("http://192.168.10.1", "reg03") not in locks._registry


def test_lock_survives_invalidate_while_adapter_lives() -> None:
    session = RouterSession(host="192.168.10.1", session_id="reg04")
    older = RouterAdapter(session)
    SessionManager().invalidate(session)
    gc.collect()
    newer = RouterAdapter(RouterSession(host="192.168.10.1", session_id="reg04"))
    assert newer._lock is older._lock


# ---------------------------------------------------------------------------
# Concurrent writes against a stateful device
# ---------------------------------------------------------------------------

class _EchoDevice:
    """Serves the wireless form from its state; a POST replaces the state."""

    def __init__(self) -> None:
        self.state = {"ESSID": "Home", "Channel_ID": "6", "wlan_APenable": "1"}
        self.posts = 0

    def page(self, request: requests.PreparedRequest) -> tuple[int, dict[str, str], str]:
        snapshot = dict(self.state)
        # Widen the read-modify-write window.
        time.sleep(0.05)
        inputs = "".join(f'<input name="{k}" value="{v}">' for k, v in snapshot.items())
        return 200, {}, f'<html><form name="WLAN">{inputs}</form></html>'

    def submit(self, request: requests.PreparedRequest) -> tuple[int, dict[str, str], str]:
        self.state = dict(parse_qsl(str(request.body), keep_blank_values=True))
        self.posts += 1
        return 200, {}, "<html>OK</html>"


@responses_lib.activate
def test_concurrent_writes_on_one_session_both_land() -> None:
    device = _EchoDevice()
    url = f"{_BASE}{endpoints.HOME_WIRELESS}"
    responses_lib.add_callback(responses_lib.GET, url, callback=device.page)
    responses_lib.add_callback(responses_lib.POST, url, callback=device.submit)

    session = RouterSession(host="192.168.10.1", session_id="race01")
    results: list[OperationResult] = []

    def run(write: str) -> None:
        adapter = RouterAdapter(session)
        if write == "ssid":
            results.append(adapter.set_wifi_ssid("Guest"))
        else:
            results.append(adapter.set_wifi_channel(11))

    threads = [threading.Thread(target=run, args=(w,)) for w in ("ssid", "channel")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)

    assert [r.success for r in results] == [True, True]
    assert device.posts == 2
    assert device.state["ESSID"] == "Guest"
    assert device.state["Channel_ID"] == "11"


@responses_lib.activate
def test_read_waits_for_write() -> None:
    responses_lib.add(
        responses_lib.GET, f"{_BASE}{endpoints.DEVICE_INFO}", body="<html></html>"
    )
    session = RouterSession(host="192.168.10.1", session_id="race02")
    adapter = RouterAdapter(session, lock_timeout_s=0.05)
    with session_lock(session).write():
        with pytest.raises(TimeoutError):
            adapter.get_device_info()
    assert len(responses_lib.calls) == 0
