"""Tests for the aiohttp transport against a local server."""

import asyncio
import json
import socket
from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from aiohttp import test_utils, web
from fluent_http import (
    AiohttpTransport,
    ClientConfig,
    HttpClient,
    StatusCodeError,
    TransportError,
    TransportErrorKind,
    TransportResponse,
)


async def echo(request: web.Request) -> web.Response:
    body = await request.read()
    return web.json_response(
        {
            "method": request.method,
            "query": dict(request.query),
            "user_agent": request.headers.get("User-Agent"),
            "body": body.decode(),
        },
        headers={"X-Server": "test"},
    )


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.Response(text="late")


async def large(request: web.Request) -> web.Response:
    return web.Response(body=b"x" * 4096)


def create_app(flaky_failures: int = 0) -> web.Application:
    state = {"remaining": flaky_failures}

    async def flaky(request: web.Request) -> web.Response:
        if state["remaining"] > 0:
            state["remaining"] -= 1
            return web.Response(status=503, text="busy")
        return web.Response(text="recovered")

    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/slow", slow)
    app.router.add_get("/large", large)
    app.router.add_get("/flaky", flaky)
    return app


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestAiohttpTransport:
    """Tests for AiohttpTransport.execute."""

    @pytest.mark.asyncio
    async def test_execute_round_trip(self):
        """Test method, query, headers and body reach the server."""
        async with test_utils.TestServer(create_app()) as server:
            url = str(server.make_url("/echo")) + "?page=2"
            response = await AiohttpTransport().execute(
                "POST",
                url,
                headers={"User-Agent": "transport-test"},
                body=b"hello",
                timeout=5,
            )

        assert isinstance(response, TransportResponse)
        assert response.status_code == 200
        assert response.headers["X-Server"] == "test"
        assert response.url == url
        payload = json.loads(response.content)
        assert payload == {
            "method": "POST",
            "query": {"page": "2"},
            "user_agent": "transport-test",
            "body": "hello",
        }

    @pytest.mark.asyncio
    async def test_context_manager_reuses_session(self):
        """Test that a pooled session serves several requests."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpTransport() as transport:
                first = await transport.execute("GET", str(server.make_url("/echo")), headers={})
                second = await transport.execute("DELETE", str(server.make_url("/echo")), headers={})

        assert first.status_code == 200
        assert b'"DELETE"' in second.content

    @pytest.mark.asyncio
    async def test_timeout_classified(self):
        """Test that a slow response raises a TIMED_OUT error."""
        async with test_utils.TestServer(create_app()) as server:
            with pytest.raises(TransportError) as exc_info:
                await AiohttpTransport().execute("GET", str(server.make_url("/slow")), headers={}, timeout=0.2)

        assert exc_info.value.kind == TransportErrorKind.TIMED_OUT
        assert exc_info.value.is_transient

    @pytest.mark.asyncio
    async def test_refused_connection_classified(self):
        """Test that an unreachable port raises CANNOT_CONNECT_TO_HOST."""
        url = f"http://127.0.0.1:{unused_port()}/"

        with pytest.raises(TransportError) as exc_info:
            await AiohttpTransport().execute("GET", url, headers={}, timeout=5)

        assert exc_info.value.kind == TransportErrorKind.CANNOT_CONNECT_TO_HOST
        assert exc_info.value.is_transient

    @pytest.mark.asyncio
    async def test_content_size_limit(self):
        """Test that oversized bodies are rejected."""
        async with test_utils.TestServer(create_app()) as server:
            with pytest.raises(TransportError) as exc_info:
                await AiohttpTransport(max_content_size=1024).execute(
                    "GET", str(server.make_url("/large")), headers={}
                )

        assert exc_info.value.kind == TransportErrorKind.OTHER
        assert not exc_info.value.is_transient

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,kind",
        [
            (
                aiohttp.ClientConnectorDNSError(MagicMock(), OSError(-2, "Name or service not known")),
                TransportErrorKind.DNS_LOOKUP_FAILED,
            ),
            (aiohttp.ServerDisconnectedError(), TransportErrorKind.CONNECTION_LOST),
            (aiohttp.ClientPayloadError("truncated body"), TransportErrorKind.CONNECTION_LOST),
            (
                aiohttp.ClientSSLError(MagicMock(), OSError(1, "certificate verify failed")),
                TransportErrorKind.OTHER,
            ),
        ],
    )
    async def test_client_errors_classified(self, error, kind):
        """Test that aiohttp failures map to their transport error kinds."""
        with patch.object(aiohttp.ClientSession, "request", side_effect=error):
            async with AiohttpTransport() as transport:
                with pytest.raises(TransportError) as exc_info:
                    await transport.execute("GET", "https://api.example.com/", headers={})

        assert exc_info.value.kind == kind
        assert exc_info.value.__cause__ is error
        assert exc_info.value.is_transient == (kind != TransportErrorKind.OTHER)


class TestEndToEnd:
    """Tests for the full request pipeline over a real socket."""

    @pytest.mark.asyncio
    async def test_retry_recovers_from_server_errors(self):
        """Test that 503 responses are retried until the server recovers."""
        async with test_utils.TestServer(create_app(flaky_failures=2)) as server:
            config = ClientConfig(base_url=str(server.make_url("/")))
            async with HttpClient(config) as client:
                response = await client.get("flaky").retry(2, delay=0).send()

        assert response.text() == "recovered"

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        """Test that the final 503 is raised when retries run out."""
        async with test_utils.TestServer(create_app(flaky_failures=5)) as server:
            config = ClientConfig(base_url=str(server.make_url("/")))
            async with HttpClient(config) as client:
                with pytest.raises(StatusCodeError) as exc_info:
                    await client.get("flaky").retry(1, delay=0).send()

        assert exc_info.value == StatusCodeError(503)

    @pytest.mark.asyncio
    async def test_query_and_user_agent(self):
        """Test that builder settings arrive at the server."""
        async with test_utils.TestServer(create_app()) as server:
            config = ClientConfig(base_url=str(server.make_url("/")), user_agent="fluent-tests")
            async with HttpClient(config) as client:
                response = await client.get("echo").query("q", "a b").send()

        payload = response.validate().decode(dict)
        assert payload["query"] == {"q": "a b"}
        assert payload["user_agent"] == "fluent-tests"
