"""HTTP transport for the OilFox REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyoilfox._constants import API_VERSION, USER_AGENT
from pyoilfox._redact import redact_for_log
from pyoilfox.config import OilFoxConfig
from pyoilfox.exceptions import OilFoxConnectionError, OilFoxFormatError, OilFoxTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, path: str, token: str) -> Any:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        ...


def build_headers(token: str | None = None) -> dict[str, str]:
    """Build the fixed request headers, with bearer auth when *token* is set."""
    headers: dict[str, str] = {
        "Content-Type": "application/json",
        "Connection": "Keep-Alive",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class HttpTransport:
    """JSON-over-HTTPS transport with a fixed timeout and no retries.

    ``get_json`` paths are resolved against the versioned API base of the
    configured schema generation (e.g. ``https://api.oilfox.io/v3``);
    ``post_json`` endpoints are resolved against the bare host.
    """

    def __init__(self, config: OilFoxConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.timeout)
        self._api_base = f"{config.base_url}/{API_VERSION[config.schema_version]}"

    @property
    def api_base(self) -> str:
        return self._api_base

    async def get_json(self, path: str, token: str) -> Any:
        """GET ``{api_base}/{path}`` with bearer authorization and decode JSON."""
        url = f"{self._api_base}/{path.lstrip('/')}"
        return await self._request("GET", url, endpoint=path, headers=build_headers(token))

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        """POST *payload* as JSON to ``{base_url}{endpoint}`` and decode JSON."""
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("POST %s payload=%s", url, redact_for_log(dict(payload)))
        return await self._request(
            "POST",
            url,
            endpoint=endpoint,
            headers=build_headers(),
            body=json.dumps(dict(payload), separators=(",", ":")),
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        endpoint: str,
        headers: dict[str, str],
        body: str | None = None,
    ) -> Any:
        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    snippet = raw[:200].decode("utf-8", errors="replace")
                    raise OilFoxTransportError(
                        f"HTTP {resp.status} from {endpoint}: {snippet}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except OilFoxTransportError:
            raise
        except TimeoutError as exc:
            raise OilFoxConnectionError(
                f"Request to {endpoint} timed out after {self._config.timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise OilFoxConnectionError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise OilFoxFormatError(
                f"Invalid JSON from {endpoint}: {raw[:200]!r}",
                endpoint=endpoint,
            ) from exc
