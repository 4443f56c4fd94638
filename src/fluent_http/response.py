"""HTTP response with fluent validation and decoding."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar, Union

from charset_normalizer import from_bytes as detect_encoding

from .codec import JsonCodec, JsonDecoder
from .errors import DecodingError, StatusCodeError
from .models.http import SUCCESS_STATUS_CODES, StatusCodeRange, StatusCodeRangeLike

logger = logging.getLogger(__name__)

T = TypeVar("T")

Validator = Callable[["Response"], None]


@dataclass(frozen=True)
class Response:
    """
    Received HTTP response.

    Validation methods return the response itself so they chain into a
    final decode:

        user = (
            await fluent_http.get(endpoint).send()
        ).validate(range(200, 201)).decode(User)

    Attributes:
        data: Raw response body
        status_code: HTTP status code
        headers: Response headers
        url: Final URL after any redirects
    """

    data: bytes
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    url: str = ""

    def validate(self, criteria: Union[StatusCodeRangeLike, Validator] = SUCCESS_STATUS_CODES) -> Response:
        """
        Check the response, raising if it is not acceptable.

        Args:
            criteria: Either an accepted status code range (default
                200-299) or a callable that receives this response and
                raises to reject it

        Returns:
            This response, unchanged

        Raises:
            StatusCodeError: If status_code is outside the range
            Exception: Whatever a custom validator raises
        """
        if callable(criteria):
            criteria(self)
            return self

        if self.status_code not in StatusCodeRange.coerce(criteria):
            raise StatusCodeError(self.status_code)
        return self

    def decode(self, type_: type[T], decoder: Optional[JsonDecoder] = None) -> T:
        """
        Decode the body into type_.

        The cause of a failure is logged at DEBUG level and not attached to
        the raised error.

        Args:
            type_: Target type (dict, a dataclass, a pydantic model, ...)
            decoder: Decoder to use (defaults to JsonCodec)

        Raises:
            DecodingError: If the body cannot be decoded as type_
        """
        decoder = decoder or JsonCodec()
        try:
            return decoder.decode(self.data, type_)
        except Exception as e:
            logger.debug(f"Response.decode failed for {self.url or 'response'}: {e!r}")
            raise DecodingError() from None

    @property
    def raw_data(self) -> bytes:
        """The unprocessed body bytes."""
        return self.data

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""

    def text(self, encoding: Optional[str] = None) -> str:
        """
        Decode the body to a string.

        Fallback chain:
        1. The explicit encoding argument
        2. Content-Type header charset
        3. Strict UTF-8
        4. charset-normalizer detection
        5. UTF-8 with replacement

        Args:
            encoding: Encoding to use instead of detection

        Returns:
            Decoded string
        """
        if encoding is None:
            for part in self.content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return self.data.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        if not self.data:
            return ""

        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError:
            pass

        best_match = detect_encoding(self.data).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return self.data.decode("utf-8", errors="replace")
