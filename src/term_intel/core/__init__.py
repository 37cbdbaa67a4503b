"""
Core module for the term comprehension pipeline.

Contains the error taxonomy shared by every stage.
"""

from term_intel.core.exceptions import (
    ErrorKind,
    ComprehensionError,
    SearchFailedError,
    InvalidURLError,
    ContentExtractionError,
    ParsingError,
    ModelError,
    GeneralError,
    EmptyQueryError,
    ConfigurationError,
)

__all__ = [
    "ErrorKind",
    # Base
    "ComprehensionError",
    # Retrieval
    "SearchFailedError",
    "InvalidURLError",
    "ContentExtractionError",
    # Synthesis
    "ParsingError",
    "ModelError",
    # General
    "GeneralError",
    "EmptyQueryError",
    "ConfigurationError",
]
