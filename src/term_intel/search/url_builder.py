"""
Search URL construction.

The search provider's URL shape is fixed: an https GET against the
search path with the joined keywords, a result count, UTF-8
input/output declarations and an optional interface language.
"""

import locale
import os
import re

import httpx

from term_intel.core.exceptions import InvalidURLError

SEARCH_SCHEME = "https"
SEARCH_HOST = "www.google.com"
SEARCH_PATH = "/search"

# Declared input and output encodings of the query
SEARCH_ENCODING = "utf8"


def resolve_language() -> str | None:
    """
    Resolve the interface language from the current process locale.

    Returns:
        Lower-case ISO 639 language code (e.g. "en", "ja"), or None
        when the locale is unset, C/POSIX, or not recognizable.
    """
    try:
        code = locale.getlocale()[0]
    except ValueError:
        code = None

    if not code:
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            code = os.environ.get(var)
            if code:
                break

    if not code:
        return None

    language = re.split(r"[_.@-]", code, maxsplit=1)[0].lower()
    if language in ("c", "posix") or not language.isalpha() or len(language) not in (2, 3):
        return None
    return language


def build_search_url(
    keywords: list[str],
    limit: int,
    language: str | None = None,
) -> str:
    """
    Build the search URL for a keyword list.

    Args:
        keywords: Ordered, non-empty keyword list
        limit: Number of results to request (positive)
        language: Optional interface language hint

    Returns:
        Absolute search URL

    Raises:
        InvalidURLError: If the components cannot form a valid URL
    """
    if not keywords:
        raise InvalidURLError("Cannot build a search URL without keywords")

    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidURLError(
            "Search limit must be a positive integer",
            details={"limit": limit},
        )

    params = [
        ("q", " ".join(keywords)),
        ("num", str(limit)),
        ("ie", SEARCH_ENCODING),
        ("oe", SEARCH_ENCODING),
    ]
    if language:
        params.append(("hl", language))

    try:
        url = httpx.URL(
            scheme=SEARCH_SCHEME,
            host=SEARCH_HOST,
            path=SEARCH_PATH,
            params=params,
        )
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidURLError.wrap(e, "Could not construct search URL")

    return str(url)
