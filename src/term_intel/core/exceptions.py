"""
Custom exceptions for the term comprehension pipeline.

Every failure a caller can observe is one of the classes below. Errors
raised by collaborators (keyword extractors, HTTP transports, model
clients) are re-tagged into this hierarchy at each stage boundary so
callers only need to handle ComprehensionError.

Exception Hierarchy:
    ComprehensionError (base)
    ├── SearchFailedError
    ├── InvalidURLError
    ├── ContentExtractionError
    ├── ParsingError
    ├── ModelError
    └── GeneralError
        ├── EmptyQueryError
        └── ConfigurationError
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    EMPTY_QUERY = "empty_query"
    SEARCH_FAILED = "search_failed"
    INVALID_URL = "invalid_url"
    CONTENT_EXTRACTION_FAILED = "content_extraction_failed"
    PARSING_FAILED = "parsing_failed"
    MODEL_ERROR = "model_error"
    GENERAL_ERROR = "general_error"


class ComprehensionError(Exception):
    """
    Base exception for all comprehension pipeline errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        kind: Failure kind of this error class
    """

    kind: ErrorKind = ErrorKind.GENERAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"

    @classmethod
    def wrap(
        cls,
        error: Exception,
        message: str,
        **details: Any,
    ) -> "ComprehensionError":
        """
        Re-tag an external error as this error class.

        Errors that already belong to the hierarchy are returned unchanged
        so an inner stage's classification is never downgraded. The cause
        is chained on the new error, so callers raise the result directly
        rather than with ``raise ... from``.

        Args:
            error: The original exception
            message: Description of the failed operation
            **details: Extra context to attach

        Returns:
            An instance of cls (or the original ComprehensionError)
        """
        if isinstance(error, ComprehensionError):
            return error

        details["error"] = str(error) or error.__class__.__name__
        wrapped = cls(f"{message}: {details['error']}", details=details)
        wrapped.__cause__ = error
        wrapped.__suppress_context__ = True
        return wrapped


# =============================================================================
# Retrieval Errors
# =============================================================================


class SearchFailedError(ComprehensionError):
    """
    Error performing the web search.

    Raised when:
    - The transport fails to complete the request
    - The search returns a non-success status code
    - The response has an unexpected shape
    """

    kind = ErrorKind.SEARCH_FAILED

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.status_code = self.details.get("status_code")
        self.url = self.details.get("url")


class InvalidURLError(ComprehensionError):
    """Search URL could not be constructed from keywords and configuration."""

    kind = ErrorKind.INVALID_URL


class ContentExtractionError(ComprehensionError):
    """
    Fetched content could not be decoded.

    Raised when the response body cannot be represented in the
    detected (or fallback) character encoding.
    """

    kind = ErrorKind.CONTENT_EXTRACTION_FAILED

    def __init__(
        self,
        message: str,
        encoding: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if encoding:
            details["encoding"] = encoding
        super().__init__(message, details)
        self.encoding = self.details.get("encoding")


# =============================================================================
# Synthesis Errors
# =============================================================================


class ParsingError(ComprehensionError):
    """
    Model output could not be decoded into an analysis.

    Raised when:
    - The structured block is not valid JSON
    - A required field is missing or has the wrong type
    - The reported confidence is outside [0, 1]
    """

    kind = ErrorKind.PARSING_FAILED


class ModelError(ComprehensionError):
    """
    The generative model client failed.

    Covers transport and model-side failures, as opposed to
    failures parsing what the model produced.
    """

    kind = ErrorKind.MODEL_ERROR

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)
        self.model = self.details.get("model")


# =============================================================================
# General Errors
# =============================================================================


class GeneralError(ComprehensionError):
    """Catch-all for conditions not covered by a more specific kind."""

    kind = ErrorKind.GENERAL_ERROR


class EmptyQueryError(GeneralError):
    """
    Query is empty or whitespace-only.

    Raised by input validation before any network or model call.
    """

    kind = ErrorKind.EMPTY_QUERY


class ConfigurationError(GeneralError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is malformed
    - Setting values fail validation
    """

    pass
