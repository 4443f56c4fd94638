"""Errors produced by the request pipeline."""

from __future__ import annotations

from typing import Optional


class NetworkingError(Exception):
    """
    Base class for all errors raised by fluent_http.

    Errors compare equal when they are the same kind and carry the same
    payload, so callers can write ``assert err == StatusCodeError(404)``.
    The optional ``detail`` is informational only and does not take part
    in equality.
    """

    description = "A networking error occurred."

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(f"{self.description} {detail}" if detail else self.description)

    def __reduce__(self):
        return (type(self), (self.detail,))

    def _identity(self) -> tuple:
        return (type(self),)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkingError):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class InvalidURL(NetworkingError):
    description = "The URL is invalid."


class NoData(NetworkingError):
    description = "No data was returned from the server."


class InvalidResponse(NetworkingError):
    description = "The server response was invalid."


class StatusCodeError(NetworkingError):
    """Response status fell outside the accepted range."""

    description = "Request failed with status code"

    def __init__(self, code: int) -> None:
        self.code = code
        self.detail = None
        Exception.__init__(self, f"{self.description} {code}.")

    def __reduce__(self):
        return (type(self), (self.code,))

    def _identity(self) -> tuple:
        return (type(self), self.code)

    def __repr__(self) -> str:
        return f"StatusCodeError({self.code})"


class EncodingError(NetworkingError):
    description = "Failed to encode the request body."


class DecodingError(NetworkingError):
    description = "Failed to decode the response body."
