"""Data models for fluent_http."""

from .config import AuthConfig, AuthType, ClientConfig, RetryConfig
from .http import (
    ALL_STATUS_CODES,
    SUCCESS_STATUS_CODES,
    HttpMethod,
    StatusCodeRange,
)

__all__ = [
    # Config
    "AuthConfig",
    "AuthType",
    "ClientConfig",
    "RetryConfig",
    # HTTP
    "ALL_STATUS_CODES",
    "HttpMethod",
    "StatusCodeRange",
    "SUCCESS_STATUS_CODES",
]
