"""Login endpoint.

Endpoint:
  - POST /v3/login  ``{"email", "password"} -> {"access_token", ...}``

The same endpoint serves both schema generations.
"""

from __future__ import annotations

import logging
from typing import Any

from pyoilfox._constants import LOGIN_ENDPOINT
from pyoilfox._redact import redact_for_log
from pyoilfox._transport import Transport
from pyoilfox.config import Credentials
from pyoilfox.exceptions import (
    OilFoxAuthenticationError,
    OilFoxConnectionError,
    OilFoxFormatError,
    OilFoxTransportError,
)
from pyoilfox.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_login_request(credentials: Credentials) -> dict[str, str]:
    """Build the JSON body for the login endpoint."""
    return {"email": credentials.email, "password": credentials.password}


def parse_login_response(response: Any, email: str = "") -> AuthToken:
    """Extract the access token from a decoded login response.

    Raises
    ------
    OilFoxAuthenticationError
        If the response is not an object or has no non-empty
        ``access_token`` string.
    """
    _logger.debug("Login response parsed=%s", redact_for_log(response))
    if not isinstance(response, dict):
        raise OilFoxAuthenticationError("Login response is not a JSON object", email=email)

    token = response.get("access_token")
    if not isinstance(token, str) or not token.strip():
        raise OilFoxAuthenticationError("Login response missing access_token", email=email)

    return AuthToken(access_token=token.strip(), raw=response)


async def login(transport: Transport, credentials: Credentials) -> AuthToken:
    """POST credentials and return the issued token.

    Connectivity failures propagate as :class:`OilFoxConnectionError`;
    every other non-success (HTTP error status, malformed body, missing
    token) is reported as :class:`OilFoxAuthenticationError`.
    """
    try:
        response = await transport.post_json(LOGIN_ENDPOINT, build_login_request(credentials))
    except OilFoxConnectionError:
        raise
    except (OilFoxTransportError, OilFoxFormatError) as exc:
        raise OilFoxAuthenticationError(
            f"Login rejected for {credentials.email}: {exc}",
            email=credentials.email,
        ) from exc
    return parse_login_response(response, credentials.email)
