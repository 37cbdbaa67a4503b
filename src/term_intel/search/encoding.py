"""
Character encoding detection for fetched HTML.

Search pages are served in region-specific charsets; decoding
Japanese pages with the wrong codec silently corrupts the text, so
the charset is taken from the response before decoding.

Precedence (first match wins):
1. charset= in the Content-Type header
2. charset= in the document itself (usually a meta tag)
3. UTF-8
"""

import re
from typing import Mapping

DEFAULT_ENCODING = "utf-8"

# Recognized charset tokens -> Python codec names
CHARSET_ENCODINGS = {
    "shift_jis": "shift_jis",
    "shift-jis": "shift_jis",
    "shiftjis": "shift_jis",
    "euc-jp": "euc_jp",
    "iso-2022-jp": "iso2022_jp",
    "utf-8": "utf-8",
    "utf8": "utf-8",
}

HEADER_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([^\s;\"']+)", re.IGNORECASE)

# Letters, digits, hyphen and underscore after the first charset= in the body
BODY_CHARSET_RE = re.compile(r"charset=[\"']?([A-Za-z0-9_-]*)", re.IGNORECASE)


def charset_to_encoding(charset: str | None) -> str | None:
    """
    Map a charset token to a Python codec name.

    Args:
        charset: Charset token as found in a header or document

    Returns:
        Codec name, or None if the charset is not recognized
    """
    if not charset:
        return None
    return CHARSET_ENCODINGS.get(charset.strip().lower())


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup."""
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def encoding_from_headers(headers: Mapping[str, str]) -> str | None:
    """Recognized encoding declared by the Content-Type header, if any."""
    content_type = _get_header(headers, "content-type")
    if not content_type:
        return None

    match = HEADER_CHARSET_RE.search(content_type)
    if match is None:
        return None
    return charset_to_encoding(match.group(1))


def encoding_from_body(body: bytes) -> str | None:
    """Recognized encoding declared inside the document, if any."""
    # Lossy ASCII view: undecodable bytes become U+FFFD and end the token
    content = body.decode("ascii", errors="replace")

    match = BODY_CHARSET_RE.search(content)
    if match is None:
        return None
    return charset_to_encoding(match.group(1))


def detect_encoding(headers: Mapping[str, str], body: bytes) -> str:
    """
    Detect the encoding of an HTTP response body.

    Args:
        headers: Response headers
        body: Raw response body

    Returns:
        Python codec name to decode the body with
    """
    return (
        encoding_from_headers(headers)
        or encoding_from_body(body)
        or DEFAULT_ENCODING
    )
