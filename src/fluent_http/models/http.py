"""HTTP method and status code range value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class HttpMethod(str, Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@dataclass(frozen=True)
class StatusCodeRange:
    """
    Closed interval of HTTP status codes.

    Both ends are inclusive, so ``StatusCodeRange(200, 299)`` accepts 200
    and 299.

    Example:
        >>> 204 in StatusCodeRange(200, 299)
        True
        >>> StatusCodeRange.coerce("400-499")
        StatusCodeRange(first=400, last=499)
    """

    first: int
    last: int

    def __post_init__(self) -> None:
        if self.first > self.last:
            raise ValueError(f"Invalid status code range: {self.first} > {self.last}")

    def __contains__(self, code: object) -> bool:
        return isinstance(code, int) and self.first <= code <= self.last

    def __str__(self) -> str:
        return f"{self.first}-{self.last}"

    @classmethod
    def coerce(cls, value: StatusCodeRangeLike) -> StatusCodeRange:
        """
        Build a range from any of the accepted spellings.

        Args:
            value: A StatusCodeRange, a ``(first, last)`` tuple, a step-1
                ``range`` (half-open, as Python ranges are) or a
                ``"first-last"`` string

        Returns:
            Equivalent closed StatusCodeRange

        Raises:
            ValueError: If the value cannot be interpreted as a range
        """
        if isinstance(value, StatusCodeRange):
            return value
        if isinstance(value, range):
            if value.step != 1 or len(value) == 0:
                raise ValueError(f"Status code range must be non-empty with step 1: {value!r}")
            return cls(value.start, value.stop - 1)
        if isinstance(value, tuple) and len(value) == 2:
            return cls(int(value[0]), int(value[1]))
        if isinstance(value, str):
            first, sep, last = value.strip().partition("-")
            if not sep:
                code = int(first)
                return cls(code, code)
            try:
                return cls(int(first), int(last))
            except ValueError as err:
                raise ValueError(f"Invalid status code range: {value!r}") from err
        raise ValueError(f"Cannot interpret {value!r} as a status code range")


StatusCodeRangeLike = Union[StatusCodeRange, tuple[int, int], range, str]

SUCCESS_STATUS_CODES = StatusCodeRange(200, 299)

# Every standard HTTP status code
ALL_STATUS_CODES = StatusCodeRange(100, 599)
