"""
HTTP transport for search requests.
"""

from dataclasses import dataclass, field
from types import TracebackType
from typing import Mapping, Protocol

import httpx

from term_intel.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and raw body of an HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Protocol for HTTP transports."""

    async def get(self, url: str) -> HttpResponse: ...


class HttpxTransport:
    """
    Transport backed by httpx.AsyncClient.

    Uses httpx's default timeouts and performs no retries. Without a
    shared client (or an enclosing ``async with``), a client is opened
    and closed for each request.

    Example:
        >>> async with HttpxTransport() as transport:
        ...     response = await transport.get("https://example.com")
    """

    def __init__(
        self,
        user_agent: str | None = None,
        headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize transport.

        Args:
            user_agent: Custom User-Agent header
            headers: Extra request headers
            client: Optional shared client (not closed by this object)
        """
        self.headers = dict(headers or {})
        if user_agent:
            self.headers["User-Agent"] = user_agent
        self._client = client
        self._owns_client = False

    async def __aenter__(self) -> "HttpxTransport":
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
            self._owns_client = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def get(self, url: str) -> HttpResponse:
        """
        Perform a GET request.

        Args:
            url: Absolute URL to fetch

        Returns:
            HttpResponse with the raw body

        Raises:
            httpx.HTTPError: If the request fails at the transport level
        """
        if self._client is not None:
            response = await self._client.get(url, headers=self.headers)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(url, headers=self.headers)

        logger.debug(f"GET {url} -> {response.status_code} ({len(response.content)} bytes)")

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            url=str(response.url),
        )
