from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyoilfox._api.login import parse_login_response
from pyoilfox.config import Credentials
from pyoilfox.exceptions import (
    OilFoxAuthenticationError,
    OilFoxConnectionError,
    OilFoxFormatError,
    OilFoxTransportError,
)
from pyoilfox.session import SessionManager
from pyoilfox.state.tokens import MemoryTokenStore


@dataclass
class FakeLoginTransport:
    response: Any = field(default_factory=lambda: {"access_token": "fresh-token", "refresh_token": "r"})
    error: Exception | None = None
    posts: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        self.posts.append((endpoint, dict(payload)))
        if self.error is not None:
            raise self.error
        return self.response

    async def get_json(self, path: str, token: str) -> Any:
        raise AssertionError("session manager must not fetch data")


CREDENTIALS = Credentials(email="user@example.com", password="secret")


@pytest.mark.asyncio
async def test_forced_login_posts_credentials_and_persists_token() -> None:
    transport = FakeLoginTransport()
    tokens = MemoryTokenStore("stale-token")

    token = await SessionManager(transport, CREDENTIALS, tokens).ensure_token(force=True)

    assert token == "fresh-token"
    assert tokens.get_token() == "fresh-token"
    assert transport.posts == [("/v3/login", {"email": "user@example.com", "password": "secret"})]


@pytest.mark.asyncio
async def test_unforced_call_reuses_stored_token() -> None:
    transport = FakeLoginTransport()
    tokens = MemoryTokenStore("cached-token")

    token = await SessionManager(transport, CREDENTIALS, tokens).ensure_token(force=False)

    assert token == "cached-token"
    assert transport.posts == []


@pytest.mark.asyncio
async def test_unforced_call_logs_in_without_stored_token() -> None:
    transport = FakeLoginTransport()
    tokens = MemoryTokenStore()

    assert await SessionManager(transport, CREDENTIALS, tokens).ensure_token(force=False) == "fresh-token"
    assert len(transport.posts) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [{}, {"access_token": ""}, {"access_token": 5}, ["access_token"], None])
async def test_missing_token_raises_and_keeps_previous_token(response: Any) -> None:
    transport = FakeLoginTransport(response=response)
    tokens = MemoryTokenStore("previous-token")

    with pytest.raises(OilFoxAuthenticationError) as excinfo:
        await SessionManager(transport, CREDENTIALS, tokens).ensure_token()

    assert excinfo.value.email == "user@example.com"
    assert "secret" not in str(excinfo.value)
    assert tokens.get_token() == "previous-token"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        OilFoxTransportError("HTTP 401 from /v3/login", status_code=401, endpoint="/v3/login"),
        OilFoxFormatError("Invalid JSON from /v3/login", endpoint="/v3/login"),
    ],
)
async def test_rejected_login_is_an_authentication_error(error: Exception) -> None:
    transport = FakeLoginTransport(error=error)
    tokens = MemoryTokenStore()

    with pytest.raises(OilFoxAuthenticationError):
        await SessionManager(transport, CREDENTIALS, tokens).ensure_token()

    assert tokens.get_token() is None


@pytest.mark.asyncio
async def test_unreachable_login_is_a_connection_error() -> None:
    transport = FakeLoginTransport(error=OilFoxConnectionError("timed out", endpoint="/v3/login"))
    tokens = MemoryTokenStore("previous-token")

    with pytest.raises(OilFoxConnectionError):
        await SessionManager(transport, CREDENTIALS, tokens).ensure_token()

    assert tokens.get_token() == "previous-token"


def test_parse_login_response_keeps_raw_payload() -> None:
    token = parse_login_response({"access_token": " abc ", "expires_in": 3600})

    assert token.access_token == "abc"
    assert token.raw["expires_in"] == 3600
    assert "abc" not in repr(token)
