"""
Search module for term-intel.

Provides the retrieval stage:
- Search URL construction
- HTTP transport
- Charset detection and decoding
- Reduction of the page to plain-text evidence
"""

from term_intel.search.url_builder import (
    build_search_url,
    resolve_language,
    SEARCH_HOST,
    SEARCH_PATH,
)
from term_intel.search.encoding import (
    detect_encoding,
    charset_to_encoding,
    CHARSET_ENCODINGS,
    DEFAULT_ENCODING,
)
from term_intel.search.transport import (
    HttpResponse,
    Transport,
    HttpxTransport,
)
from term_intel.search.retriever import (
    SearchRetriever,
    RetrievedPage,
)

__all__ = [
    # URL
    "build_search_url",
    "resolve_language",
    "SEARCH_HOST",
    "SEARCH_PATH",
    # Encoding
    "detect_encoding",
    "charset_to_encoding",
    "CHARSET_ENCODINGS",
    "DEFAULT_ENCODING",
    # Transport
    "HttpResponse",
    "Transport",
    "HttpxTransport",
    # Retrieval
    "SearchRetriever",
    "RetrievedPage",
]
