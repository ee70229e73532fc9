"""Low-level HTTP client wrapper for the PTCL router console."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import requests

from napalm_ptcl.client.errors import (
    RouterRequestError,
    RouterResponseError,
    SessionExpiredError,
)
from napalm_ptcl.vendor.ptcl.endpoints import FETCH_TIMEOUT_S, LOGIN_MARKERS, USER_AGENT

logger = logging.getLogger(__name__)

_EXPIRED_STATUSES: frozenset[int] = frozenset({401, 403})


def _normalise_base_url(url: str) -> str:
    """Ensure the URL has a scheme and no trailing slash."""
    url = url.rstrip("/")
    if not url.startswith(("http://", "https://")):
        url = "http://" + url
    return url


def _is_login_target(location: str) -> bool:
    lowered = location.lower()
    return any(marker in lowered for marker in LOGIN_MARKERS)


class PTCLHTTP:
    """Low-level HTTP wrapper around :class:`requests.Session`.

    Sends a desktop-browser ``User-Agent``, an optional fixed ``Cookie``
    header, timeout and TLS settings, and maps transport/HTTP failures to
    :mod:`.errors` types:

    - 401/403, or any redirect towards a login page, raise
      :exc:`.SessionExpiredError`;
    - other non-2xx statuses raise :exc:`.RouterResponseError`;
    - ``requests`` exceptions raise :exc:`.RouterRequestError`.

    Args:
        base_url: Router base URL, e.g. ``http://192.168.10.1``.
        timeout_s: Request timeout in seconds (default 10).
        verify_tls: Whether to verify TLS certificates (default False).
        cookie_header: Value for the ``Cookie`` header sent on every request.
        auth: Optional ``requests`` auth object (HTTP Basic during login).
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = FETCH_TIMEOUT_S,
        verify_tls: bool = False,
        cookie_header: str | None = None,
        auth: requests.auth.AuthBase | None = None,
    ) -> None:
        self.base_url: str = _normalise_base_url(base_url)
        self.timeout_s: float = timeout_s
        self.verify_tls: bool = verify_tls
        self._session: requests.Session = requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})
        if cookie_header:
            # An explicit header wins over anything the jar collects, so the
            # caller's cookie set is the only one ever replayed.
            self._session.headers["Cookie"] = cookie_header
        if auth is not None:
            self._session.auth = auth

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(
        self,
        path: str,
        params: dict[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """Send an HTTP GET to *path* and return the response.

        Args:
            path: URL path relative to :attr:`base_url`.
            params: Optional query-string parameters.
            allow_redirects: Follow redirects (default True).  With ``False``
                a non-login 3xx response is returned as-is.

        Returns:
            The :class:`requests.Response`.

        Raises:
            SessionExpiredError: On 401/403 or a redirect to the login page.
            RouterRequestError: On any transport-level failure.
            RouterResponseError: On any other non-2xx HTTP status code.
        """
        url = self.base_url + path
        logger.debug("GET %s", url)
        try:
            resp = self._session.get(
                url,
                params=params,
                timeout=self.timeout_s,
                verify=self.verify_tls,
                allow_redirects=allow_redirects,
            )
        except requests.exceptions.RequestException as exc:
            raise RouterRequestError(url, exc, sent=_reached_device(exc)) from exc
        self._check_response(resp, url)
        return resp

    def post_form(
        self,
        path: str,
        data: dict[str, str] | list[tuple[str, str]] | None = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """Send an HTTP POST with form-encoded *data* to *path*.

        Args:
            path: URL path relative to :attr:`base_url`.
            data: Form fields.  A ``dict`` or a ``list[tuple[str, str]]`` when
                field order or repeated keys matter.
            allow_redirects: Follow redirects (default True).  With ``False``
                a non-login 3xx response is returned as-is.

        Returns:
            The :class:`requests.Response`.

        Raises:
            SessionExpiredError: On 401/403 or a redirect to the login page.
            RouterRequestError: On any transport-level failure.
            RouterResponseError: On any other non-2xx HTTP status code.
        """
        url = self.base_url + path
        logger.debug("POST %s (%d fields)", url, len(data or ()))
        try:
            resp = self._session.post(
                url,
                data=data,
                timeout=self.timeout_s,
                verify=self.verify_tls,
                allow_redirects=allow_redirects,
            )
        except requests.exceptions.RequestException as exc:
            raise RouterRequestError(url, exc, sent=_reached_device(exc)) from exc
        self._check_response(resp, url)
        return resp

    @property
    def cookies(self) -> requests.cookies.RequestsCookieJar:
        """Cookies collected by the underlying session."""
        return self._session.cookies

    def close(self) -> None:
        """Close the underlying :class:`requests.Session`."""
        self._session.close()

    def __enter__(self) -> PTCLHTTP:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _check_response(resp: requests.Response, url: str) -> None:
        for hop in [*resp.history, resp]:
            if hop.status_code in _EXPIRED_STATUSES:
                raise SessionExpiredError(url=url, status_code=hop.status_code)
            location = hop.headers.get("Location", "")
            if hop.is_redirect and _is_login_target(location):
                raise SessionExpiredError(url=url, location=location)
        if resp.history and _is_login_target(urlparse(resp.url).path):
            raise SessionExpiredError(url=url, location=resp.url)
        if resp.is_redirect:
            return
        if not resp.ok:
            raise RouterResponseError(resp.status_code, resp.url)


def _reached_device(exc: requests.exceptions.RequestException) -> bool:
    """True when the request was written before the failure happened."""
    return isinstance(exc, requests.exceptions.ReadTimeout)
