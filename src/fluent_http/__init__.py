"""
fluent_http - Fluent HTTP request builder with retries and validation.

Usage:
    import fluent_http
    from fluent_http import Endpoint

    endpoint = Endpoint.from_parts("https://api.example.com", "/users")

    response = await (
        fluent_http.get(endpoint)
        .query("page", "1")
        .bearer(token)
        .retry(2, delay=0.5)
        .send()
    )
    users = response.validate().decode(list[User])
"""

__version__ = "1.0.0"

from .client import HttpClient, default_client, delete, get, patch, post, put
from .codec import JsonCodec, JsonDecoder, JsonEncoder
from .endpoint import Endpoint
from .errors import (
    DecodingError,
    EncodingError,
    InvalidResponse,
    InvalidURL,
    NetworkingError,
    NoData,
    StatusCodeError,
)
from .http import AiohttpTransport, Transport, TransportError, TransportErrorKind, TransportResponse
from .models.config import AuthConfig, AuthType, ClientConfig, RetryConfig
from .models.http import ALL_STATUS_CODES, SUCCESS_STATUS_CODES, HttpMethod, StatusCodeRange
from .request import Request
from .response import Response
from .retry import RetryPolicy, default_should_retry, execute_with_retry

__all__ = [
    "__version__",
    # Core
    "Endpoint",
    "Request",
    "Response",
    "HttpClient",
    "default_client",
    "get",
    "post",
    "put",
    "delete",
    "patch",
    # Retry
    "RetryPolicy",
    "default_should_retry",
    "execute_with_retry",
    # Errors
    "NetworkingError",
    "InvalidURL",
    "NoData",
    "InvalidResponse",
    "StatusCodeError",
    "EncodingError",
    "DecodingError",
    # Transport
    "Transport",
    "TransportError",
    "TransportErrorKind",
    "TransportResponse",
    "AiohttpTransport",
    # Codec
    "JsonCodec",
    "JsonDecoder",
    "JsonEncoder",
    # Config
    "ClientConfig",
    "RetryConfig",
    "AuthConfig",
    "AuthType",
    # HTTP
    "HttpMethod",
    "StatusCodeRange",
    "SUCCESS_STATUS_CODES",
    "ALL_STATUS_CODES",
]
