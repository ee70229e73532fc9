"""Per-session readers/writer locks.

Every adapter built from an equal :class:`~napalm_ptcl.client.session.RouterSession`
shares one lock, so a write's read-merge-submit window never interleaves
with another write or with a read on the same router session.  The registry
holds its locks weakly: an entry lasts while some adapter still uses it.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from napalm_ptcl.client.session import RouterSession

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Writer-preferring readers/writer lock.

    Not reentrant: a thread holding the write side must not take either side
    again.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self, timeout: float | None = None) -> Iterator[None]:
        """Hold the shared side for the duration of the ``with`` block.

        Raises:
            TimeoutError: If the lock is not acquired within *timeout* seconds.
        """
        with self._cond:
            ok = self._cond.wait_for(
                lambda: not self._writer and not self._waiting_writers, timeout
            )
            if not ok:
                raise TimeoutError("Unable to acquire lock within the specified timeout.")
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self, timeout: float | None = None) -> Iterator[None]:
        """Hold the exclusive side for the duration of the ``with`` block.

        Raises:
            TimeoutError: If the lock is not acquired within *timeout* seconds.
        """
        with self._cond:
            self._waiting_writers += 1
            try:
                ok = self._cond.wait_for(
                    lambda: not self._writer and not self._readers, timeout
                )
            finally:
                self._waiting_writers -= 1
            if not ok:
                self._cond.notify_all()
                raise TimeoutError("Unable to acquire lock within the specified timeout.")
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


_registry: weakref.WeakValueDictionary[tuple[str, str], ReadWriteLock] = (
    weakref.WeakValueDictionary()
)
_registry_guard = threading.Lock()


def _key(session: RouterSession) -> tuple[str, str]:
    return (session.base_url.lower(), session.session_id)


def session_lock(session: RouterSession) -> ReadWriteLock:
    """Return the lock shared by every holder of an equal *session*."""
    key = _key(session)
    with _registry_guard:
        lock = _registry.get(key)
        if lock is None:
            lock = _registry[key] = ReadWriteLock()
            logger.debug("Created session lock for %s", key[0])
        return lock
