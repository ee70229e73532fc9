"""Session lifecycle for the PTCL router console.

The console guards every page with HTTP Basic authentication and then hands
out cookies.  A :class:`RouterSession` is the value object holding those
cookies; :class:`SessionManager` establishes, validates, resumes and forgets it.
The adapter never stores cookies of its own: every adapter is built from an
explicit session value.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any

from requests.auth import HTTPBasicAuth

from napalm_ptcl.client.errors import (
    InvalidCredentialsError,
    SessionExpiredError,
    TransportError,
)
from napalm_ptcl.client.http import PTCLHTTP, _normalise_base_url
from napalm_ptcl.vendor.ptcl.endpoints import AUTH_TIMEOUT_S, ROOT, VALIDATE_TIMEOUT_S

logger = logging.getLogger(__name__)

NO_SESSION: str = "NO_SESSION"

# Cookie names containing any of these are taken as the session identifier.
_SESSION_COOKIE_HINTS: tuple[str, ...] = ("session", "sid", "auth")


@dataclass(frozen=True)
class RouterCredentials:
    """Immutable login details for one router.

    Args:
        host: Router address, with or without scheme (``192.168.10.1``).
        username: Console username.
        password: Console password.
    """

    host: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class RouterSession:
    """Authenticated session value: device address plus console cookies.

    Args:
        host: Router address as given at login.
        session_id: Value of the cookie identifying the session, or
            ``"NO_SESSION"`` when the router set no cookie at all.
        cookies: ``(name, value)`` pairs replayed on every request.
        expires_at: Earliest cookie expiry (epoch seconds), if the router
            sent one.
    """

    host: str
    session_id: str
    cookies: tuple[tuple[str, str], ...] = ()
    expires_at: float | None = None

    @property
    def base_url(self) -> str:
        """Host normalised to ``scheme://host[:port]``."""
        return _normalise_base_url(self.host)

    def cookie_header(self) -> str:
        """Render :attr:`cookies` as a ``Cookie:`` header value."""
        return "; ".join(f"{name}={value}" for name, value in self.cookies)

    def is_expired(self, now: float | None = None) -> bool:
        """True when the expiry hint has passed.

        Sessions without an expiry hint never expire locally; only
        :meth:`SessionManager.validate` can tell.
        """
        if self.expires_at is None:
            return False
        return (time.time() if now is None else now) >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        """Serialise to plain JSON-compatible types for external storage."""
        return {
            "host": self.host,
            "session_id": self.session_id,
            "cookies": [list(pair) for pair in self.cookies],
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RouterSession:
        """Rebuild a session stored with :meth:`to_dict`.

        Raises:
            ValueError: If ``host`` is missing.
        """
        host = data.get("host")
        if not host:
            raise ValueError("Stored session has no host")
        cookies = tuple(
            (str(name), str(value)) for name, value in data.get("cookies") or ()
        )
        expires_at = data.get("expires_at")
        return cls(
            host=str(host),
            session_id=str(data.get("session_id") or _pick_session_id(cookies)),
            cookies=cookies,
            expires_at=float(expires_at) if expires_at is not None else None,
        )

    @classmethod
    def from_cookie_string(cls, host: str, cookie_string: str) -> RouterSession:
        """Build a session from a raw ``Cookie:`` header value.

        Args:
            host: Router address.
            cookie_string: ``"a=1; b=2"`` as captured from a browser.
        """
        cookies: list[tuple[str, str]] = []
        for part in cookie_string.split(";"):
            name, sep, value = part.strip().partition("=")
            if sep and name:
                cookies.append((name.strip(), value.strip()))
        pairs = tuple(cookies)
        return cls(host=host, session_id=_pick_session_id(pairs), cookies=pairs)


class SessionState(enum.Enum):
    """Lifecycle states tracked by :class:`SessionManager`."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    ACTIVE = "active"
    EXPIRED = "expired"


class SessionManager:
    """Establishes and tracks the session for one router.

    Args:
        verify_tls: Whether to verify TLS certificates (default False; the
            console ships a self-signed certificate when HTTPS is enabled).
        auth_timeout_s: Timeout for the login exchange (default 15).
        validate_timeout_s: Timeout for :meth:`validate` (default 5).
    """

    def __init__(
        self,
        verify_tls: bool = False,
        auth_timeout_s: float = AUTH_TIMEOUT_S,
        validate_timeout_s: float = VALIDATE_TIMEOUT_S,
    ) -> None:
        self.verify_tls = verify_tls
        self.auth_timeout_s = auth_timeout_s
        self.validate_timeout_s = validate_timeout_s
        self._lock = threading.Lock()
        self._state = SessionState.UNAUTHENTICATED
        self._session: RouterSession | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def current(self) -> RouterSession | None:
        """The stored session, if any."""
        return self._session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def authenticate(self, credentials: RouterCredentials) -> RouterSession:
        """Log in with HTTP Basic auth and capture the console cookies.

        Follows redirects like a browser would, collecting every cookie set
        along the way.

        Args:
            credentials: Router address and login pair.

        Returns:
            The new active session.

        Raises:
            InvalidCredentialsError: If the router answers 401/403 or sends
                the client back to its login page.
            TransportError: If the router cannot be reached.
        """
        self._set_state(SessionState.AUTHENTICATING)
        http = PTCLHTTP(
            credentials.host,
            timeout_s=self.auth_timeout_s,
            verify_tls=self.verify_tls,
            auth=HTTPBasicAuth(credentials.username, credentials.password),
        )
        try:
            http.get(ROOT)
            jar = list(http.cookies)
        except SessionExpiredError as exc:
            self._set_state(SessionState.UNAUTHENTICATED)
            raise InvalidCredentialsError("Invalid credentials") from exc
        except TransportError:
            self._set_state(SessionState.UNAUTHENTICATED)
            raise
        finally:
            http.close()

        cookies = tuple((c.name, c.value or "") for c in jar)
        expiries = [float(c.expires) for c in jar if c.expires]
        session = RouterSession(
            host=credentials.host,
            session_id=_pick_session_id(cookies),
            cookies=cookies,
            expires_at=min(expiries) if expiries else None,
        )
        with self._lock:
            self._session = session
            self._state = SessionState.ACTIVE
        logger.info(
            "Session established with %s (%d cookies)", session.base_url, len(cookies)
        )
        return session

    def validate(self, session: RouterSession | None = None) -> bool:
        """Ask the router whether *session* is still accepted.

        Advisory only: a session can expire right after a successful check.
        Call it before reusing a persisted session.

        Args:
            session: Session to check; defaults to the stored one.

        Returns:
            ``True`` when the router serves its root page with these cookies.
            ``False`` when it rejects them (the stored session is then
            cleared) or cannot be reached (nothing is cleared).
        """
        session = session or self._session
        if session is None:
            return False
        http = PTCLHTTP(
            session.host,
            timeout_s=self.validate_timeout_s,
            verify_tls=self.verify_tls,
            cookie_header=session.cookie_header(),
        )
        try:
            resp = http.get(ROOT, allow_redirects=False)
        except SessionExpiredError:
            self._expire(session)
            return False
        except TransportError as exc:
            logger.warning("Session check of %s failed: %s", session.base_url, exc)
            return False
        finally:
            http.close()
        if resp.status_code != 200:
            self._expire(session)
            return False
        return True

    def resume(self, session: RouterSession) -> RouterSession | None:
        """Adopt a persisted *session* if the router still accepts it.

        Returns:
            The adopted session, or ``None`` when it is no longer valid.
        """
        if not self.validate(session):
            return None
        with self._lock:
            self._session = session
            self._state = SessionState.ACTIVE
        logger.debug("Resumed session %s for %s", session.session_id, session.base_url)
        return session

    def get_valid_session(self) -> RouterSession | None:
        """Return the stored session after re-validating it, else ``None``."""
        session = self._session
        if session is None or not self.validate(session):
            return None
        return session

    def invalidate(self, session: RouterSession | None = None) -> None:
        """Forget the stored session (best-effort; never raises).

        Idempotent.  Passing a session other than the stored one leaves the
        stored session in place.
        """
        with self._lock:
            target = session or self._session
            if target is not None and (session is None or session == self._session):
                self._session = None
                self._state = SessionState.UNAUTHENTICATED
        if target is not None:
            logger.info("Session invalidated for %s", target.base_url)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _expire(self, session: RouterSession) -> None:
        with self._lock:
            if self._session is None or session == self._session:
                self._session = None
                self._state = SessionState.EXPIRED
        logger.debug("Session %s for %s expired", session.session_id, session.base_url)

    def _set_state(self, state: SessionState) -> None:
        with self._lock:
            self._state = state
        logger.debug("Session state -> %s", state.value)


def _pick_session_id(cookies: tuple[tuple[str, str], ...]) -> str:
    for name, value in cookies:
        lowered = name.lower()
        if any(hint in lowered for hint in _SESSION_COOKIE_HINTS):
            return value
    if cookies:
        return cookies[0][1]
    return NO_SESSION
