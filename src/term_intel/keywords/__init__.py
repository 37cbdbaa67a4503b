"""
Keyword module for term-intel.

Provides keyword extraction from free-text queries:
- Rule-based extraction with stop-word filtering
- Model-backed extraction
"""

from term_intel.keywords.extractor import (
    KeywordExtractor,
    RuleKeywordExtractor,
    LLMKeywordExtractor,
)

__all__ = [
    "KeywordExtractor",
    "RuleKeywordExtractor",
    "LLMKeywordExtractor",
]
