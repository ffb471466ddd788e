"""Custom exception hierarchy for pyoilfox."""

from __future__ import annotations


class OilFoxError(Exception):
    """Base exception for all pyoilfox errors."""


class OilFoxConfigError(OilFoxError):
    """Invalid or missing configuration."""


class OilFoxTransportError(OilFoxError):
    """HTTP-level failure (non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class OilFoxConnectionError(OilFoxTransportError):
    """Remote API unreachable or the request timed out."""


class OilFoxFormatError(OilFoxError):
    """Response body is not JSON or lacks the keys a stage depends on."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class OilFoxAuthenticationError(OilFoxError):
    """Login did not yield a usable access token.

    Raised for rejected credentials as well as for login responses that
    are malformed or lack the ``access_token`` field.  Connectivity
    problems during login surface as :class:`OilFoxConnectionError`
    instead.
    """

    def __init__(self, message: str, *, email: str = "") -> None:
        self.email = email
        super().__init__(message)


class OilFoxSinkError(OilFoxError):
    """The persistence sink rejected a create or update."""
