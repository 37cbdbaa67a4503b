"""
Extraction module for term-intel.

Provides HTML to plain text conversion for fetched search pages.
"""

from term_intel.extraction.text_converter import (
    TextConverter,
    HtmlTextConverter,
)

__all__ = [
    "TextConverter",
    "HtmlTextConverter",
]
