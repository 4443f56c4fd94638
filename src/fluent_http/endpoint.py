"""Validated HTTP endpoints."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote, urlsplit, urlunsplit

from .errors import InvalidURL

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})

# Characters left as-is when a path is appended; everything else is percent-encoded
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"

_WHITESPACE = re.compile(r"\s")


def _check_url(url: str) -> None:
    """Raise InvalidURL unless url is an absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url or _WHITESPACE.search(url):
        raise InvalidURL(repr(url))
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError as err:
        raise InvalidURL(repr(url)) from err

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURL(f"Scheme '{parsed.scheme}' not allowed in {url!r}")
    if not hostname:
        raise InvalidURL(f"URL has no host: {url!r}")


@dataclass(frozen=True)
class Endpoint:
    """
    An absolute http(s) URL that has passed validation.

    Build one from a base URL and a path, or from a full URL string:

        Endpoint.from_parts("https://api.example.com", "/v1/users")
        Endpoint.from_string("https://api.example.com/v1/users")

    Both produce ``https://api.example.com/v1/users``.

    Raises:
        InvalidURL: If the scheme is not http/https, the host is missing,
            or the URL cannot be parsed
    """

    url: str

    def __post_init__(self) -> None:
        _check_url(self.url)

    def __str__(self) -> str:
        return self.url

    @classmethod
    def from_string(cls, url: str) -> Endpoint:
        """Create an endpoint from a complete URL string."""
        return cls(url)

    @classmethod
    def from_parts(cls, base_url: str, path: str) -> Endpoint:
        """
        Create an endpoint by appending path to base_url.

        Leading and trailing slashes are stripped from path before it is
        joined; an empty (or all-slash) path yields base_url unchanged.
        The query string of base_url is preserved.

        Args:
            base_url: Base URL (e.g. "https://api.example.com")
            path: Relative path (e.g. "/v1/resource")

        Returns:
            The combined Endpoint
        """
        _check_url(base_url)

        cleaned = path.strip("/")
        if not cleaned:
            return cls(base_url)

        parts = urlsplit(base_url)
        joined_path = f"{parts.path.rstrip('/')}/{quote(cleaned, safe=_PATH_SAFE)}"
        url = urlunsplit((parts.scheme, parts.netloc, joined_path, parts.query, parts.fragment))
        logger.debug(f"Resolved endpoint {url} from base {base_url}")
        return cls(url)
