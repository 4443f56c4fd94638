"""Fluent HTTP request builder and executor."""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union
from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit

from .codec import JsonCodec, JsonEncoder
from .errors import EncodingError, InvalidResponse, InvalidURL, StatusCodeError
from .http.protocols import Transport, TransportResponse
from .models.http import (
    ALL_STATUS_CODES,
    SUCCESS_STATUS_CODES,
    HttpMethod,
    StatusCodeRange,
    StatusCodeRangeLike,
)
from .response import Response
from .retry import RetryPolicy, ShouldRetry, execute_with_retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAY = 1.0


class Request:
    """
    A configurable HTTP request.

    Requests are created by HttpClient factories (or the module-level
    ``get``/``post``/... helpers), configured through chained calls, then
    sent once with ``send()``:

        response = await (
            fluent_http.post(endpoint)
            .bearer(token)
            .query("dry_run", "1")
            .json_body({"name": "Ann"})
            .retry(2, delay=0.5)
            .send()
        )

    A request must be fully configured before it is sent. Changing it
    while ``send()`` is in flight is not supported.
    """

    def __init__(
        self,
        url: str,
        method: Union[HttpMethod, str],
        transport: Transport,
        encoder: Optional[JsonEncoder] = None,
    ) -> None:
        self.url = url
        self.method = HttpMethod(method)
        self._transport = transport
        self._encoder = encoder

        self.header_fields: dict[str, str] = {}
        self.query_parameters: dict[str, str] = {}
        self.body_data: Optional[bytes] = None
        self.timeout_interval: float = DEFAULT_TIMEOUT
        self.valid_status_codes: StatusCodeRange = SUCCESS_STATUS_CODES

        self.retry_count: int = 0
        self.retry_delay: float = DEFAULT_RETRY_DELAY
        self.should_retry: Optional[ShouldRetry] = None

        self._sent = False

    def __repr__(self) -> str:
        return f"Request({self.method.value} {self.url})"

    # Headers

    def header(self, key: str, value: str) -> Request:
        """Set a single header field."""
        self.header_fields[key] = value
        return self

    def headers(self, headers: Mapping[str, str]) -> Request:
        """Merge headers into the request; new values win."""
        self.header_fields.update(headers)
        return self

    def basic(self, username: str, password: str) -> Request:
        """Set HTTP Basic authentication."""
        token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self.header_fields["Authorization"] = f"Basic {token}"
        return self

    def bearer(self, token: str) -> Request:
        """Set a Bearer token Authorization header."""
        self.header_fields["Authorization"] = f"Bearer {token}"
        return self

    def user_agent(self, value: str) -> Request:
        """Set the User-Agent header. An empty value leaves it unchanged."""
        if value:
            self.header_fields["User-Agent"] = value
        return self

    # Query parameters

    def query(self, key: str, value: str) -> Request:
        """Add a single query parameter."""
        self.query_parameters[key] = value
        return self

    def queries(self, parameters: Mapping[str, str]) -> Request:
        """Merge query parameters into the request; new values win."""
        self.query_parameters.update(parameters)
        return self

    # Body

    def body(self, data: Union[bytes, str]) -> Request:
        """Set the raw request body, replacing any previous body."""
        self.body_data = data.encode() if isinstance(data, str) else bytes(data)
        return self

    def json_body(self, obj: Any, encoder: Optional[JsonEncoder] = None) -> Request:
        """
        Encode obj as JSON and use it as the body.

        Also sets ``Content-Type: application/json``. Nothing is changed if
        encoding fails.

        Args:
            obj: Object to encode (dict, list, dataclass, pydantic model, ...)
            encoder: Encoder to use (defaults to the client's, then JsonCodec)

        Raises:
            EncodingError: If obj cannot be encoded
        """
        encoder = encoder or self._encoder or JsonCodec()
        try:
            data = encoder.encode(obj)
        except EncodingError:
            raise
        except Exception as e:
            raise EncodingError(str(e)) from e

        self.body_data = data
        self.header_fields["Content-Type"] = "application/json"
        return self

    # Status code validation

    def accept_status_codes(self, status_codes: StatusCodeRangeLike) -> Request:
        """Set which status codes count as success when the response arrives."""
        self.valid_status_codes = StatusCodeRange.coerce(status_codes)
        return self

    def skip_status_validation(self) -> Request:
        """
        Accept every standard status code (100-599).

        The response can still be checked later with ``Response.validate``.
        """
        self.valid_status_codes = ALL_STATUS_CODES
        return self

    # Timeout & retry

    def timeout(self, seconds: float) -> Request:
        """Set the request timeout in seconds. Negative values clamp to 0."""
        self.timeout_interval = max(0.0, seconds)
        return self

    def retry(
        self,
        count: int,
        delay: float = 0,
        should_retry: Optional[ShouldRetry] = None,
    ) -> Request:
        """
        Configure retries.

        Args:
            count: Retries after the first attempt (negative values clamp to 0)
            delay: Seconds between attempts (negative values clamp to 0)
            should_retry: Optional ``(error, attempt_index) -> bool``; when
                omitted, 5xx responses and transient connection failures
                are retried
        """
        self.retry_count = max(0, count)
        self.retry_delay = max(0.0, delay)
        self.should_retry = should_retry
        return self

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(self.retry_count, self.retry_delay, self.should_retry)

    # Sending

    async def send(self) -> Response:
        """
        Send the request, retrying as configured.

        Returns:
            The accepted Response

        Raises:
            InvalidURL: If the URL cannot be reassembled with the query
            InvalidResponse: If the transport returned something other than
                an HTTP response
            StatusCodeError: If the final status is outside the accepted range
            TransportError: On connectivity failures
            RuntimeError: If the request was already sent
        """
        if self._sent:
            raise RuntimeError(f"{self!r} has already been sent")
        self._sent = True

        return await execute_with_retry(self._perform_single_request, self.retry_policy)

    async def _perform_single_request(self) -> Response:
        url = self.build_url()
        result = await self._transport.execute(
            self.method.value,
            url,
            headers=dict(self.header_fields),
            body=self.body_data,
            timeout=self.timeout_interval,
        )

        if not isinstance(result, TransportResponse) or not isinstance(result.status_code, int):
            raise InvalidResponse(f"Transport returned {type(result).__name__}")

        if result.status_code not in self.valid_status_codes:
            raise StatusCodeError(result.status_code)

        return Response(
            data=result.content,
            status_code=result.status_code,
            headers=result.headers,
            url=result.url or url,
        )

    def build_url(self) -> str:
        """
        Return the target URL with query parameters merged in.

        Configured parameters replace every existing parameter of the same
        name in the URL's query string. Other existing parameters are kept
        verbatim, including repeated keys and keys without a value.

        Raises:
            InvalidURL: If the URL cannot be split or reassembled
        """
        if not self.query_parameters:
            return self.url
        try:
            parts = urlsplit(self.url)
            kept = [
                pair
                for pair in parts.query.split("&")
                if pair and unquote_plus(pair.partition("=")[0]) not in self.query_parameters
            ]
            kept.append(urlencode(self.query_parameters))
            return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(kept), parts.fragment))
        except (ValueError, TypeError) as e:
            raise InvalidURL(str(e)) from e
