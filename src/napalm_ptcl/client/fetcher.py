"""Authenticated page fetcher bound to one router session."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from urllib.parse import urljoin, urlparse

import requests

from napalm_ptcl.client.errors import RouterResponseError
from napalm_ptcl.client.http import PTCLHTTP
from napalm_ptcl.client.session import RouterSession
from napalm_ptcl.vendor.ptcl.endpoints import FETCH_TIMEOUT_S

logger = logging.getLogger(__name__)

_MAX_REDIRECTS = 5


def _redirect_path(resp: requests.Response) -> str:
    target = urlparse(urljoin(resp.url, resp.headers.get("Location", "")))
    return f"{target.path}?{target.query}" if target.query else target.path


class PageFetcher:
    """GETs console pages and POSTs forms with the session's cookies.

    Never retries and never mutates the session: a
    :exc:`~napalm_ptcl.client.errors.SessionExpiredError` is the caller's cue
    to re-authenticate.  Redirects are inspected one hop at a time, so a
    bounce to the login page is reported without requesting that page.

    Args:
        session: Authenticated router session.
        timeout_s: Per-request timeout in seconds (default 10).
        verify_tls: Whether to verify TLS certificates (default False).
    """

    def __init__(
        self,
        session: RouterSession,
        timeout_s: float = FETCH_TIMEOUT_S,
        verify_tls: bool = False,
    ) -> None:
        self.session = session
        self._http = PTCLHTTP(
            session.host,
            timeout_s=timeout_s,
            verify_tls=verify_tls,
            cookie_header=session.cookie_header(),
        )

    def fetch(self, path: str) -> str:
        """Return the body of the page at *path*.

        Same-host redirects are followed up to five hops.

        Raises:
            SessionExpiredError: If the router rejects the session.
            TransportError: On network failures, other non-2xx statuses and
                redirect loops.
        """
        for _ in range(_MAX_REDIRECTS + 1):
            resp = self._http.get(path, allow_redirects=False)
            if not resp.is_redirect:
                return resp.text
            path = _redirect_path(resp)
            logger.debug("Following redirect to %s", path)
        raise RouterResponseError(resp.status_code, resp.url)

    def submit(
        self, path: str, fields: Mapping[str, str] | Iterable[tuple[str, str]]
    ) -> str:
        """POST *fields* form-encoded to *path*, preserving order and repeats.

        A non-login redirect answer means the form was accepted and is not
        followed.

        Returns:
            The response body.

        Raises:
            SessionExpiredError: If the router rejects the session.
            TransportError: On network failures and other non-2xx statuses.
        """
        pairs = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
        return self._http.post_form(path, pairs, allow_redirects=False).text

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._http.close()
