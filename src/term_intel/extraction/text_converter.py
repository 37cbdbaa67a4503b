"""
HTML to plain text conversion.

Reduces a fetched HTML document (typically a search results page)
to whitespace-normalized text suitable as model evidence.
"""

import re
from typing import Protocol

from bs4 import BeautifulSoup

from term_intel.utils.logging import get_logger

logger = get_logger(__name__)


class TextConverter(Protocol):
    """Protocol for HTML-to-text converters."""

    def to_plain_text(self, html: str) -> str: ...


class HtmlTextConverter:
    """
    Converts HTML into plain document text.

    Removes scripts, styles, embedded media and hidden elements, then
    joins the remaining text nodes with single spaces. Best-effort:
    malformed markup degrades to partial text and never raises.

    Example:
        >>> converter = HtmlTextConverter()
        >>> converter.to_plain_text("<p>Hello <b>world</b></p>")
        'Hello world'
    """

    # Tags to completely remove
    REMOVE_TAGS = {
        "script",
        "style",
        "noscript",
        "template",
        "iframe",
        "svg",
        "canvas",
        "video",
        "audio",
        "map",
        "object",
        "embed",
    }

    HIDDEN_CLASS_RE = re.compile(r"\b(hidden|invisible|sr-only)\b")

    def __init__(self, parser: str = "html.parser") -> None:
        """
        Initialize converter.

        Args:
            parser: BeautifulSoup tree builder to use
        """
        self.parser = parser

    def to_plain_text(self, html: str) -> str:
        """
        Convert HTML to plain text.

        Args:
            html: Decoded HTML document

        Returns:
            Plain text, possibly empty
        """
        if not html or not html.strip():
            return ""

        soup = BeautifulSoup(html, self.parser)
        self._remove_tags(soup)

        text = soup.get_text(separator=" ", strip=True)
        text = re.sub(r"\s+", " ", text).strip()

        logger.debug(f"Converted {len(html)} chars of HTML to {len(text)} chars of text")
        return text

    def _remove_tags(self, soup: BeautifulSoup) -> None:
        """Remove unwanted and hidden tags from soup."""
        candidates = [
            *soup.find_all(sorted(self.REMOVE_TAGS)),
            *soup.find_all(attrs={"hidden": True}),
            *soup.find_all(attrs={"aria-hidden": "true"}),
            *soup.find_all(class_=self.HIDDEN_CLASS_RE),
        ]
        for tag in candidates:
            # Nested matches are gone once an ancestor is decomposed
            if not tag.decomposed:
                tag.decompose()
