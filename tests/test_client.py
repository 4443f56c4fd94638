"""Tests for HttpClient factories and module-level helpers."""

import base64
from unittest.mock import AsyncMock, patch

import pytest
import fluent_http
from fluent_http import (
    AiohttpTransport,
    ClientConfig,
    Endpoint,
    HttpClient,
    HttpMethod,
    InvalidURL,
    StatusCodeRange,
    TransportResponse,
)


@pytest.fixture
def transport():
    """Create mock transport returning a 200 response."""
    transport = AsyncMock()
    transport.execute.return_value = TransportResponse(status_code=200, content=b"{}")
    return transport


class TestHttpClientFactories:
    """Tests for request factories."""

    @pytest.mark.parametrize(
        "factory,method",
        [
            ("get", HttpMethod.GET),
            ("post", HttpMethod.POST),
            ("put", HttpMethod.PUT),
            ("delete", HttpMethod.DELETE),
            ("patch", HttpMethod.PATCH),
        ],
    )
    def test_factory_sets_method_and_url(self, transport, factory, method):
        """Test that each factory binds its method and the endpoint URL."""
        client = HttpClient(transport=transport)
        endpoint = Endpoint.from_parts("https://api.example.com", "users")

        request = getattr(client, factory)(endpoint)

        assert request.method == method
        assert request.url == "https://api.example.com/users"
        transport.execute.assert_not_called()

    def test_string_resolved_against_base_url(self, transport):
        """Test that string paths join the configured base URL."""
        client = HttpClient(ClientConfig(base_url="https://api.example.com/v1"), transport=transport)
        assert client.get("/users/1").url == "https://api.example.com/v1/users/1"

    def test_string_without_base_url_must_be_absolute(self, transport):
        """Test that full URL strings are accepted without a base URL."""
        client = HttpClient(transport=transport)
        assert client.get("https://example.com/a").url == "https://example.com/a"

        with pytest.raises(InvalidURL):
            client.get("/relative")

    def test_invalid_base_url_raises(self, transport):
        """Test that an invalid base URL surfaces as InvalidURL."""
        client = HttpClient(ClientConfig(base_url="ht tp://invalid url with spaces"), transport=transport)
        with pytest.raises(InvalidURL):
            client.get("users")

    def test_default_transport(self):
        """Test that the aiohttp transport is used when none is given."""
        assert isinstance(HttpClient().transport, AiohttpTransport)


class TestHttpClientDefaults:
    """Tests for configuration defaults applied to new requests."""

    def test_config_defaults_applied(self, transport):
        """Test timeout, retry, headers, user agent and status range defaults."""
        config = ClientConfig(
            timeout=12,
            retry={"count": 2, "delay": 0.1},
            headers={"Accept": "application/json"},
            user_agent="fluent-tests/1.0",
            accept_status_codes=(200, 399),
        )
        request = HttpClient(config, transport=transport).get("https://api.example.com")

        assert request.timeout_interval == 12
        assert request.retry_count == 2
        assert request.retry_delay == 0.1
        assert request.header_fields == {"Accept": "application/json", "User-Agent": "fluent-tests/1.0"}
        assert request.valid_status_codes == StatusCodeRange(200, 399)

    def test_bearer_auth_applied(self, transport):
        """Test that bearer credentials are added."""
        config = ClientConfig(auth={"type": "bearer", "token": "tok"})
        request = HttpClient(config, transport=transport).get("https://api.example.com")
        assert request.header_fields["Authorization"] == "Bearer tok"

    def test_basic_auth_applied(self, transport):
        """Test that basic credentials are added."""
        config = ClientConfig(auth={"type": "basic", "username": "u", "password": "p"})
        request = HttpClient(config, transport=transport).get("https://api.example.com")
        assert request.header_fields["Authorization"] == f"Basic {base64.b64encode(b'u:p').decode()}"

    def test_request_overrides_defaults(self, transport):
        """Test that per-request settings override client defaults."""
        config = ClientConfig(headers={"Accept": "application/json"}, retry={"count": 5})
        request = (
            HttpClient(config, transport=transport)
            .get("https://api.example.com")
            .header("Accept", "text/csv")
            .retry(0)
        )
        assert request.header_fields["Accept"] == "text/csv"
        assert request.retry_count == 0

    def test_config_headers_not_shared(self, transport):
        """Test that mutating one request does not leak into the config."""
        config = ClientConfig(headers={"Accept": "application/json"})
        client = HttpClient(config, transport=transport)
        client.get("https://api.example.com").header("Accept", "text/csv")

        assert config.headers == {"Accept": "application/json"}
        assert client.get("https://api.example.com").header_fields["Accept"] == "application/json"


class TestHttpClientLifecycle:
    """Tests for client context management and sending."""

    @pytest.mark.asyncio
    async def test_context_manager_delegates_to_transport(self, transport):
        """Test that entering the client enters the transport."""
        async with HttpClient(transport=transport) as client:
            assert isinstance(client, HttpClient)

        transport.__aenter__.assert_awaited_once()
        transport.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_send_through_client(self, transport):
        """Test an end-to-end send through the client's transport."""
        client = HttpClient(ClientConfig(base_url="https://api.example.com"), transport=transport)

        response = await client.post("items").json_body({"name": "pen"}).send()

        assert response.decode(dict) == {}
        args, kwargs = transport.execute.call_args
        assert args == ("POST", "https://api.example.com/items")
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["body"] == b'{"name":"pen"}'


class TestModuleHelpers:
    """Tests for module-level get/post/... helpers."""

    def test_default_client_is_shared(self):
        """Test that the default client is created once."""
        assert fluent_http.default_client() is fluent_http.default_client()

    @pytest.mark.parametrize("name", ["get", "post", "put", "delete", "patch"])
    def test_helpers_use_default_client(self, transport, name):
        """Test that module helpers delegate to the default client."""
        client = HttpClient(transport=transport)
        with patch("fluent_http.client.default_client", return_value=client):
            request = getattr(fluent_http, name)(Endpoint.from_string("https://example.com"))

        assert request.method == HttpMethod(name.upper())
        assert request.url == "https://example.com"
