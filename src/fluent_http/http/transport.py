"""aiohttp-backed transport."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Optional

import aiohttp

from ..errors import InvalidURL
from .protocols import TransportError, TransportErrorKind, TransportResponse

logger = logging.getLogger(__name__)


class AiohttpTransport:
    """
    Transport that performs requests with aiohttp.

    Features:
    - Connection-level failures mapped to TransportError kinds
    - Content size limits to prevent memory exhaustion
    - Optional proxy

    Used as an async context manager it keeps one ClientSession open for
    every request. Outside a context each request opens and closes its own
    session.

    Example:
        async with AiohttpTransport() as transport:
            response = await transport.execute("GET", "https://example.com", headers={})
            print(response.status_code)
    """

    MAX_CONTENT_SIZE = 50 * 1024 * 1024  # 50 MB
    CHUNK_SIZE = 8192

    def __init__(
        self,
        max_content_size: int = MAX_CONTENT_SIZE,
        proxy: Optional[str] = None,
        limit: int = 100,
        limit_per_host: int = 10,
    ) -> None:
        """
        Initialize the transport.

        Args:
            max_content_size: Maximum response size in bytes
            proxy: Proxy URL (http://...)
            limit: Total connection limit of the pooled session
            limit_per_host: Per-host connection limit of the pooled session
        """
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._limit = limit
        self._limit_per_host = limit_per_host
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=self._limit,
            limit_per_host=self._limit_per_host,
            ttl_dns_cache=300,
        )
        self._session = aiohttp.ClientSession(connector=connector)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def execute(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        body: Optional[bytes] = None,
        timeout: float = 30.0,
    ) -> TransportResponse:
        """
        Perform a single HTTP request.

        Args:
            method: HTTP method name
            url: Absolute URL including query string
            headers: Request headers
            body: Optional request body
            timeout: Total timeout in seconds (0 disables it)

        Returns:
            TransportResponse with status, content, and headers

        Raises:
            TransportError: On connectivity failures or oversized content
            InvalidURL: If aiohttp rejects the URL
        """
        if self._session is not None:
            return await self._execute(self._session, method, url, headers, body, timeout)

        async with aiohttp.ClientSession() as session:
            return await self._execute(session, method, url, headers, body, timeout)

    async def _execute(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Optional[bytes],
        timeout: float,
    ) -> TransportResponse:
        logger.debug(f"{method} {url}")
        try:
            async with session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=aiohttp.ClientTimeout(total=timeout or None),
                proxy=self._proxy,
                allow_redirects=True,
            ) as response:
                content_length = response.headers.get("Content-Length")
                if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
                    raise TransportError(
                        TransportErrorKind.OTHER,
                        f"Content too large: {content_length} bytes",
                    )

                content = b""
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    content += chunk
                    if len(content) > self._max_content_size:
                        raise TransportError(
                            TransportErrorKind.OTHER,
                            f"Content size limit exceeded: >{self._max_content_size} bytes",
                        )

                return TransportResponse(
                    status_code=response.status,
                    content=content,
                    headers=dict(response.headers),
                    url=str(response.url),
                )

        except asyncio.TimeoutError as e:
            raise TransportError(TransportErrorKind.TIMED_OUT, f"Request to {url} timed out") from e
        except aiohttp.InvalidURL as e:
            raise InvalidURL(str(e)) from e
        except aiohttp.ClientConnectorDNSError as e:
            raise TransportError(TransportErrorKind.DNS_LOOKUP_FAILED, str(e)) from e
        except aiohttp.ClientSSLError as e:
            raise TransportError(TransportErrorKind.OTHER, str(e)) from e
        except aiohttp.ClientConnectorError as e:
            raise TransportError(TransportErrorKind.CANNOT_CONNECT_TO_HOST, str(e)) from e
        except (aiohttp.ServerDisconnectedError, aiohttp.ClientPayloadError, aiohttp.ClientOSError) as e:
            raise TransportError(TransportErrorKind.CONNECTION_LOST, str(e)) from e
        except aiohttp.ClientError as e:
            raise TransportError(TransportErrorKind.OTHER, str(e)) from e
