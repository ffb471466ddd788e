from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest
from aiohttp import test_utils, web

from pyoilfox._constants import InstanceStatus, SchemaVersion
from pyoilfox._transport import HttpTransport
from pyoilfox.client import OilFoxClient
from pyoilfox.config import OilFoxConfig
from pyoilfox.exceptions import OilFoxConnectionError, OilFoxFormatError, OilFoxTransportError
from pyoilfox.state.status import StatusRecorder
from pyoilfox.state.store import NamedValueStore
from pyoilfox.state.tokens import MemoryTokenStore
from pyoilfox.sync import CycleOutcome, CycleStage, SyncEngine

INVALID_UTF8_JSON = b'{"devices": "\xff\xfe"}'


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Any
    body: Any = None


@dataclass
class OilFoxServer:
    """Minimal OilFox HTTP backend; ``summary_body`` replaces the summary payload."""

    requests: list[RecordedRequest] = field(default_factory=list)
    summary_status: int = 200
    summary_body: bytes | None = None

    async def login(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(RecordedRequest("POST", request.path, request.headers.copy(), body))
        return web.json_response({"access_token": "wire-token", "token_type": "bearer"})

    async def summary(self, request: web.Request) -> web.Response:
        self.requests.append(RecordedRequest("GET", request.path, request.headers.copy()))
        if self.summary_body is not None:
            return web.Response(status=self.summary_status, body=self.summary_body, content_type="application/json")
        return web.json_response({"devices": []}, status=self.summary_status)

    async def slow(self, request: web.Request) -> web.Response:
        await asyncio.sleep(1.0)
        return web.json_response({})

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v3/login", self.login)
        app.router.add_get("/v3/user/summary", self.summary)
        app.router.add_get("/v4/summary", self.summary)
        app.router.add_get("/v4/slow", self.slow)
        return app


def _config(
    server: test_utils.TestServer, schema_version: SchemaVersion = SchemaVersion.V2, **overrides: Any
) -> OilFoxConfig:
    return OilFoxConfig(
        email="user@example.com",
        password="secret",
        schema_version=schema_version,
        base_url=f"http://{server.host}:{server.port}/",
        **overrides,
    )


@contextlib.asynccontextmanager
async def _serve(backend: OilFoxServer) -> AsyncIterator[test_utils.TestServer]:
    server = test_utils.TestServer(backend.app())
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_login_posts_json_to_host_without_bearer() -> None:
    backend = OilFoxServer()
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server), session)
        response = await transport.post_json("/v3/login", {"email": "user@example.com", "password": "secret"})

    assert response["access_token"] == "wire-token"
    (request,) = backend.requests
    assert request.path == "/v3/login"
    assert request.body == {"email": "user@example.com", "password": "secret"}
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["User-Agent"] == "okhttp/3.2.0"
    assert "Authorization" not in request.headers


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("schema_version", "path", "expected_path"),
    [
        (SchemaVersion.V1, "user/summary", "/v3/user/summary"),
        (SchemaVersion.V2, "summary", "/v4/summary"),
    ],
)
async def test_get_resolves_against_versioned_base_with_bearer(
    schema_version: SchemaVersion, path: str, expected_path: str
) -> None:
    backend = OilFoxServer()
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server, schema_version), session)
        assert await transport.get_json(path, "wire-token") == {"devices": []}

    (request,) = backend.requests
    assert request.path == expected_path
    assert request.headers["Authorization"] == "Bearer wire-token"


@pytest.mark.asyncio
async def test_non_2xx_status_is_a_transport_error() -> None:
    backend = OilFoxServer(summary_status=503, summary_body=b"maintenance")
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server), session)
        with pytest.raises(OilFoxTransportError) as excinfo:
            await transport.get_json("summary", "wire-token")

    assert not isinstance(excinfo.value, OilFoxConnectionError)
    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "summary"
    assert "maintenance" in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_2xx_status_with_undecodable_body_is_a_transport_error() -> None:
    backend = OilFoxServer(summary_status=500, summary_body=b"\xff\xfe")
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server), session)
        with pytest.raises(OilFoxTransportError) as excinfo:
            await transport.get_json("summary", "wire-token")

    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"<html>busy</html>", INVALID_UTF8_JSON, b""])
async def test_undecodable_success_body_is_a_format_error(body: bytes) -> None:
    backend = OilFoxServer(summary_body=body)
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server), session)
        with pytest.raises(OilFoxFormatError) as excinfo:
            await transport.get_json("summary", "wire-token")

    assert excinfo.value.endpoint == "summary"


@pytest.mark.asyncio
async def test_timeout_is_a_connection_error() -> None:
    backend = OilFoxServer()
    async with _serve(backend) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(server, timeout=0.2), session)
        with pytest.raises(OilFoxConnectionError) as excinfo:
            await transport.get_json("slow", "wire-token")

    assert excinfo.value.status_code is None
    assert "timed out" in str(excinfo.value)


@pytest.mark.asyncio
async def test_unreachable_host_is_a_connection_error() -> None:
    async with _serve(OilFoxServer()) as server:
        config = _config(server)
    # The server is closed; its port now refuses connections.

    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(config, session)
        with pytest.raises(OilFoxConnectionError):
            await transport.post_json("/v3/login", {"email": "user@example.com", "password": "secret"})


@pytest.mark.asyncio
async def test_cycle_with_undecodable_summary_reports_invalid_response() -> None:
    backend = OilFoxServer(summary_body=INVALID_UTF8_JSON)
    status = StatusRecorder()
    tokens = MemoryTokenStore()

    async with _serve(backend) as server, OilFoxClient(_config(server)) as client:
        engine = SyncEngine(client, token_store=tokens, sink=NamedValueStore(), status=status)
        result = await engine.run_once()

    assert result.outcome is CycleOutcome.INVALID_RESPONSE
    assert result.stage is CycleStage.FETCH
    assert isinstance(result.error, OilFoxFormatError)
    assert status.history == [InstanceStatus.ACTIVE, InstanceStatus.INVALID_RESPONSE]
    assert tokens.get_token() == "wire-token"
    assert [request.path for request in backend.requests] == ["/v3/login", "/v4/summary"]
