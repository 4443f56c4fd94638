"""Request factories bound to a transport and configuration."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional, Union

from .codec import JsonEncoder
from .endpoint import Endpoint
from .http.protocols import Transport
from .http.transport import AiohttpTransport
from .models.config import AuthType, ClientConfig
from .models.http import HttpMethod
from .request import Request

logger = logging.getLogger(__name__)

EndpointLike = Union[Endpoint, str]


class HttpClient:
    """
    Factory for configured Request objects.

    Every request created by a client starts with the client's defaults:
    timeout, retry policy, accepted status codes, headers, User-Agent and
    credentials. Requests can override any of them.

    Example:
        config = ClientConfig(base_url="https://api.example.com/v1")

        async with HttpClient(config) as client:
            response = await client.get("/users").query("page", "2").send()
            users = response.decode(list[User])

    Using the client as an async context manager keeps one connection pool
    open for all of its requests.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        encoder: Optional[JsonEncoder] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Defaults for new requests (ClientConfig() if omitted)
            transport: Transport to send through (AiohttpTransport if omitted)
            encoder: JSON encoder used by Request.json_body
        """
        self.config = config or ClientConfig()
        if transport is None:
            transport = AiohttpTransport(
                max_content_size=self.config.max_content_size,
                proxy=self.config.proxy,
            )
        self.transport = transport
        self._encoder = encoder

    async def __aenter__(self) -> HttpClient:
        """Enter the transport's context when it has one."""
        enter = getattr(self.transport, "__aenter__", None)
        if enter is not None:
            await enter()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the transport's context when it has one."""
        exit_ = getattr(self.transport, "__aexit__", None)
        if exit_ is not None:
            await exit_(exc_type, exc_val, exc_tb)

    def resolve(self, endpoint: EndpointLike) -> Endpoint:
        """
        Turn a string into an Endpoint.

        Strings are joined to ``config.base_url`` when one is configured,
        otherwise they must be complete URLs.

        Raises:
            InvalidURL: If the resulting URL is not valid
        """
        if isinstance(endpoint, Endpoint):
            return endpoint
        if self.config.base_url:
            return Endpoint.from_parts(self.config.base_url, endpoint)
        return Endpoint.from_string(endpoint)

    def request(self, method: Union[HttpMethod, str], endpoint: EndpointLike) -> Request:
        """Create a Request for method and endpoint with the client defaults applied."""
        target = self.resolve(endpoint)
        config = self.config

        request = (
            Request(target.url, method, self.transport, encoder=self._encoder)
            .headers(config.headers)
            .timeout(config.timeout)
            .accept_status_codes(config.status_code_range)
            .retry(config.retry.count, delay=config.retry.delay)
        )
        if config.user_agent:
            request.user_agent(config.user_agent)

        auth = config.auth
        if auth.type == AuthType.BEARER and auth.token:
            request.bearer(auth.token)
        elif auth.type == AuthType.BASIC and auth.username is not None:
            request.basic(auth.username, auth.password or "")

        logger.debug(f"Created {request!r}")
        return request

    def get(self, endpoint: EndpointLike) -> Request:
        return self.request(HttpMethod.GET, endpoint)

    def post(self, endpoint: EndpointLike) -> Request:
        return self.request(HttpMethod.POST, endpoint)

    def put(self, endpoint: EndpointLike) -> Request:
        return self.request(HttpMethod.PUT, endpoint)

    def delete(self, endpoint: EndpointLike) -> Request:
        return self.request(HttpMethod.DELETE, endpoint)

    def patch(self, endpoint: EndpointLike) -> Request:
        return self.request(HttpMethod.PATCH, endpoint)


_default_client: Optional[HttpClient] = None


def default_client() -> HttpClient:
    """Return the shared client used by the module-level helpers."""
    global _default_client
    if _default_client is None:
        _default_client = HttpClient()
    return _default_client


def get(endpoint: EndpointLike) -> Request:
    """Create a GET request using the default client."""
    return default_client().get(endpoint)


def post(endpoint: EndpointLike) -> Request:
    """Create a POST request using the default client."""
    return default_client().post(endpoint)


def put(endpoint: EndpointLike) -> Request:
    """Create a PUT request using the default client."""
    return default_client().put(endpoint)


def delete(endpoint: EndpointLike) -> Request:
    """Create a DELETE request using the default client."""
    return default_client().delete(endpoint)


def patch(endpoint: EndpointLike) -> Request:
    """Create a PATCH request using the default client."""
    return default_client().patch(endpoint)
