"""
Term Intelligence - web-search-grounded comprehension of terms and questions.

Given a free-text query, this package extracts search keywords, retrieves
a search results page, and asks a local Ollama model to turn that evidence
into a structured understanding: a definition, a category, related
concepts and a confidence score.
"""

from term_intel.config import Settings, load_config
from term_intel.utils.logging import setup_logging, get_logger
from term_intel.core.exceptions import ComprehensionError, ErrorKind
from term_intel.comprehension import (
    Configuration,
    Understanding,
    Comprehender,
    comprehend,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "ComprehensionError",
    "ErrorKind",
    "Configuration",
    "Understanding",
    "Comprehender",
    "comprehend",
]
