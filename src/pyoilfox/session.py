"""Session token lifecycle."""

from __future__ import annotations

import logging

from pyoilfox._api.login import login
from pyoilfox._transport import Transport
from pyoilfox.config import Credentials
from pyoilfox.state.sink import TokenStore

_logger = logging.getLogger(__name__)


class SessionManager:
    """Produce a bearer token for data requests.

    The manager holds no token itself: the token lives in the
    :class:`~pyoilfox.state.sink.TokenStore`, which is only written after a
    successful login.  A failed login leaves the stored token untouched
    and raises.

    The OilFox login response carries no usable expiry, so the poll cycle
    re-authenticates every time (``force=True``) instead of tracking token
    age.  ``force=False`` returns the stored token when one exists.
    """

    def __init__(self, transport: Transport, credentials: Credentials, token_store: TokenStore) -> None:
        self._transport = transport
        self._credentials = credentials
        self._token_store = token_store

    async def ensure_token(self, *, force: bool = True) -> str:
        """Return a valid token, logging in when forced or none is stored.

        Raises
        ------
        OilFoxAuthenticationError
            If the login response contains no usable token.
        OilFoxConnectionError
            If the login endpoint is unreachable or times out.
        """
        if not force:
            cached = self._token_store.get_token()
            if cached:
                return cached

        _logger.info("Logging in to OilFox account of %s", self._credentials.email)
        token = await login(self._transport, self._credentials)
        self._token_store.set_token(token.access_token)
        return token.access_token
