"""Custom exceptions for the napalm-ptcl router client."""

from __future__ import annotations

from dataclasses import dataclass


class RouterError(Exception):
    """Base exception for all napalm-ptcl errors."""


class InvalidCredentialsError(RouterError):
    """Raised when the router rejects the supplied username/password."""


@dataclass
class SessionExpiredError(RouterError):
    """Raised when the router no longer accepts the session cookies.

    Triggered by HTTP 401/403 or by a redirect to the login page.  Never
    retried by this library; callers re-authenticate and reissue the whole
    operation.
    """

    url: str
    status_code: int | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        if self.status_code is not None:
            reason = f"HTTP {self.status_code}"
        else:
            reason = f"redirected to login page {self.location!r}"
        super().__init__(f"Session expired ({reason}) for {self.url!r}")


class TransportError(RouterError):
    """Base class for network-level and non-2xx HTTP failures."""


class RouterRequestError(TransportError):
    """Raised when a network-level error occurs (connection refused, timeout, etc.).

    Attributes:
        sent: ``True`` when the request is known to have reached the router
            before the failure (read timeout), so its effect is unknown.
    """

    def __init__(self, url: str, cause: Exception, sent: bool = False) -> None:
        self.url = url
        self.cause = cause
        self.sent = sent
        super().__init__(f"Request to {url!r} failed: {cause}")


class RouterResponseError(TransportError):
    """Raised when the router returns a non-2xx HTTP status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url!r}")


class RouterParseError(RouterError):
    """Raised when a page lacks the markup a write operation depends on."""


class ValidationError(RouterError, ValueError):
    """Raised when a caller-supplied value violates a field constraint.

    Attributes:
        field: Caller-facing name of the offending field.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


@dataclass
class SubmissionError(RouterError):
    """Raised when the form POST fails after validation passed.

    Attributes:
        path: Form action path.
        cause: Underlying transport error.
        sent: ``True`` if the POST reached the router; the resulting device
            state is then unknown and must be confirmed by a follow-up read.
    """

    path: str
    cause: TransportError
    sent: bool = False

    def __post_init__(self) -> None:
        when = "after" if self.sent else "before"
        super().__init__(
            f"Submission to {self.path!r} failed {when} the form was sent: {self.cause}"
        )
