"""High-level async client for the OilFox API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyoilfox._api.login import login
from pyoilfox._api.summary import fetch_summary
from pyoilfox._transport import HttpTransport
from pyoilfox.config import OilFoxConfig
from pyoilfox.exceptions import OilFoxError
from pyoilfox.ingestion.summary import normalize_summary
from pyoilfox.models.device import DeviceRecord
from pyoilfox.models.token import AuthToken

_logger = logging.getLogger(__name__)


class OilFoxClient:
    """Async client for the OilFox API.

    Usage::

        async with OilFoxClient(config) as client:
            token = await client.login()
            devices = await client.get_devices(token.access_token)
    """

    def __init__(
        self,
        config: OilFoxConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OilFoxClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    @property
    def config(self) -> OilFoxConfig:
        return self._config

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            raise OilFoxError("Client not initialized. Use 'async with OilFoxClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    async def login(self) -> AuthToken:
        """Authenticate with the configured credentials."""
        return await login(self.transport, self._config.credentials)

    async def get_summary(self, token: str) -> Any:
        """Fetch the raw summary payload of the configured schema generation."""
        return await fetch_summary(self.transport, token, self._config.schema_version)

    async def get_devices(self, token: str) -> list[DeviceRecord]:
        """Fetch and normalize the account's devices."""
        raw = await self.get_summary(token)
        return normalize_summary(raw, self._config.schema_version)
