"""
Search retrieval stage.

Builds the search URL for a keyword list, fetches it once, decodes
the body with the detected charset and reduces it to plain text.
"""

from dataclasses import dataclass

from term_intel.core.exceptions import ContentExtractionError, SearchFailedError
from term_intel.extraction import HtmlTextConverter, TextConverter
from term_intel.search.encoding import detect_encoding
from term_intel.search.transport import HttpResponse, HttpxTransport, Transport
from term_intel.search.url_builder import build_search_url, resolve_language
from term_intel.utils.logging import get_logger
from term_intel.utils.metrics import time_search

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetrievedPage:
    """A fetched and decoded search page."""

    url: str
    status_code: int
    encoding: str
    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text


class SearchRetriever:
    """
    Retrieves plain-text search evidence for a keyword list.

    No ranking, deduplication, caching or retry is performed; one
    request is made per call.

    Example:
        >>> retriever = SearchRetriever(search_limit=10)
        >>> page = await retriever.retrieve(["quantum", "entanglement"])
        >>> print(page.text[:200])
    """

    def __init__(
        self,
        transport: Transport | None = None,
        converter: TextConverter | None = None,
        search_limit: int = 10,
        language: str | None = None,
    ) -> None:
        """
        Initialize retriever.

        Args:
            transport: HTTP transport (defaults to HttpxTransport)
            converter: HTML-to-text converter (defaults to HtmlTextConverter)
            search_limit: Number of results requested from the provider
            language: Interface language hint; None resolves it from the locale
        """
        self.transport = transport or HttpxTransport()
        self.converter = converter or HtmlTextConverter()
        self.search_limit = search_limit
        self.language = language

    def build_url(self, keywords: list[str]) -> str:
        """Build the search URL for keywords."""
        language = self.language or resolve_language()
        return build_search_url(keywords, self.search_limit, language=language)

    async def fetch(self, url: str) -> HttpResponse:
        """
        Fetch the search page.

        Raises:
            SearchFailedError: On transport failure or non-2xx status
        """
        try:
            with time_search():
                response = await self.transport.get(url)
                self._check_response(response, url)
        except Exception as e:
            logger.error(f"Search request failed: {e}")
            raise SearchFailedError.wrap(e, "Search request failed", url=url)

        return response

    @staticmethod
    def _check_response(response: HttpResponse, url: str) -> None:
        if not isinstance(response, HttpResponse):
            raise SearchFailedError("Invalid response type", url=url)

        if not response.is_success:
            raise SearchFailedError(
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

    def decode(self, response: HttpResponse) -> tuple[str, str]:
        """
        Decode a response body with its detected encoding.

        Returns:
            Tuple of (decoded html, encoding used)

        Raises:
            ContentExtractionError: If the body cannot be decoded
        """
        encoding = detect_encoding(response.headers, response.body)

        try:
            html = response.body.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise ContentExtractionError(
                "Failed to decode content",
                encoding=encoding,
                details={"error": str(e)},
            ) from e

        return html, encoding

    async def retrieve(self, keywords: list[str]) -> RetrievedPage:
        """
        Run the retrieval stage for a keyword list.

        Args:
            keywords: Ordered, non-empty keyword list

        Returns:
            RetrievedPage whose text may be empty

        Raises:
            InvalidURLError: If the search URL cannot be built
            SearchFailedError: If the fetch fails
            ContentExtractionError: If the body cannot be decoded
        """
        url = self.build_url(keywords)
        response = await self.fetch(url)
        html, encoding = self.decode(response)

        try:
            text = self.converter.to_plain_text(html)
        except Exception as e:
            raise ContentExtractionError.wrap(
                e, "Failed to convert content to text", encoding=encoding
            )

        logger.debug(
            f"Retrieved {len(text)} chars of evidence "
            f"(encoding={encoding}, status={response.status_code})"
        )

        return RetrievedPage(
            url=url,
            status_code=response.status_code,
            encoding=encoding,
            text=text,
        )
