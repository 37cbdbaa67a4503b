"""
Keyword extraction for search query construction.

Turns a free-text query into an ordered list of search keywords,
most relevant first.
"""

import json
import re
from contextlib import aclosing
from typing import Protocol

from term_intel.config import Settings
from term_intel.core.exceptions import ModelError, ParsingError
from term_intel.llm import ChatClient, ChatOptions, ChatRequest, ComprehensionPrompts
from term_intel.llm.response import extract_code_block
from term_intel.utils.logging import get_logger
from term_intel.utils.metrics import time_llm_call

logger = get_logger(__name__)


class KeywordExtractor(Protocol):
    """Protocol for keyword extractors."""

    async def extract(self, query: str) -> list[str]: ...


def _dedupe(terms: list[str]) -> list[str]:
    """Deduplicate case-insensitively while preserving order."""
    seen = set()
    unique_terms = []
    for term in terms:
        key = term.casefold()
        if key not in seen:
            seen.add(key)
            unique_terms.append(term)
    return unique_terms


class RuleKeywordExtractor:
    """
    Extracts keywords with stop-word filtering.

    Quoted phrases are kept verbatim and ranked first. Remaining words
    are lower-cased; stop words, pure numbers and short ASCII words are
    dropped. Non-ASCII runs (for example Japanese text) are kept as
    they are, since they carry no whitespace word boundaries.

    Example:
        >>> extractor = RuleKeywordExtractor()
        >>> await extractor.extract("What is quantum entanglement?")
        ['quantum', 'entanglement']
    """

    # Stop words for term extraction
    STOP_WORDS = {
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "shall", "can", "need", "dare",
        "to", "of", "in", "for", "on", "with", "at", "by", "from", "as",
        "into", "through", "during", "before", "after", "above", "below",
        "between", "under", "again", "further", "then", "once", "here",
        "there", "when", "where", "why", "how", "all", "each", "few", "more",
        "most", "other", "some", "such", "no", "nor", "not", "only", "own",
        "same", "so", "than", "too", "very", "just", "and", "but", "if", "or",
        "because", "until", "while", "about", "against",
        "what", "which", "who", "whom", "this", "that", "these", "those",
        "am", "i", "me", "my", "myself", "we", "our", "ours", "ourselves",
        "you", "your", "yours", "yourself", "yourselves", "he", "him", "his",
        "himself", "she", "her", "hers", "herself", "it", "its", "itself",
        "they", "them", "their", "theirs", "themselves", "any", "both",
        "mean", "means", "meaning", "define", "definition", "explain",
        "tell", "please",
    }

    QUOTED_RE = re.compile(r'"([^"]+)"|“([^”]+)”|「([^」]+)」')

    def __init__(self, max_keywords: int = 8) -> None:
        """
        Initialize the extractor.

        Args:
            max_keywords: Maximum number of keywords to return
        """
        self.max_keywords = max_keywords

    @classmethod
    def from_settings(cls, settings: Settings) -> "RuleKeywordExtractor":
        return cls(max_keywords=settings.keywords.max_keywords)

    async def extract(self, query: str) -> list[str]:
        """
        Extract keywords from a query.

        Args:
            query: Raw query text

        Returns:
            Ordered keyword list, possibly empty
        """
        phrases = []
        for match in self.QUOTED_RE.finditer(query):
            phrase = next(g for g in match.groups() if g is not None).strip()
            if phrase:
                phrases.append(phrase)

        remainder = self.QUOTED_RE.sub(" ", query)
        terms = phrases + self._extract_terms(remainder)

        return _dedupe(terms)[: self.max_keywords]

    def _extract_terms(self, text: str) -> list[str]:
        """Extract single-word terms from unquoted text."""
        # Remove punctuation except hyphens in compounds
        text = re.sub(r"[^\w\s-]", " ", text.lower())

        terms = []
        for word in text.split():
            word = word.strip("-_")
            if not word or word in self.STOP_WORDS or word.isdigit():
                continue
            if word.isascii() and len(word) <= 2:
                continue
            terms.append(word)

        return terms


class LLMKeywordExtractor:
    """
    Extracts keywords by asking the generative model.

    The model is instructed to answer with a JSON array of strings;
    the first JSON array of strings (inside a fenced block if any) in the
    response is parsed.
    """

    DECODER = json.JSONDecoder()

    def __init__(
        self,
        client: ChatClient,
        model: str = "llama3.2:latest",
        max_keywords: int = 8,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            client: Streaming chat client
            model: Model identifier
            max_keywords: Maximum number of keywords to return
        """
        self.client = client
        self.model = model
        self.max_keywords = max_keywords

    @classmethod
    def from_settings(cls, settings: Settings, client: ChatClient) -> "LLMKeywordExtractor":
        return cls(
            client=client,
            model=settings.llm.model,
            max_keywords=settings.keywords.max_keywords,
        )

    async def extract(self, query: str) -> list[str]:
        """
        Extract keywords from a query with the model.

        Args:
            query: Raw query text

        Returns:
            Ordered keyword list, possibly empty

        Raises:
            ModelError: If the model call fails
            ParsingError: If the response holds no JSON array of strings
        """
        request = ChatRequest(
            model=self.model,
            messages=ComprehensionPrompts.EXTRACT_KEYWORDS.messages(
                query=query,
                max_keywords=self.max_keywords,
            ),
            options=ChatOptions(temperature=0.0, top_p=1.0, top_k=1),
        )

        parts = []
        try:
            with time_llm_call():
                async with aclosing(self.client.chat(request)) as stream:
                    async for chunk in stream:
                        parts.append(chunk.content or "")
        except Exception as e:
            raise ModelError.wrap(e, "Keyword extraction request failed", model=self.model)

        keywords = self._parse(extract_code_block("".join(parts)))
        logger.debug(f"Model extracted {len(keywords)} keywords")
        return _dedupe(keywords)[: self.max_keywords]

    def _parse(self, text: str) -> list[str]:
        """
        Decode the first JSON array of strings in text.

        Decoding starts at each "[" in turn and stops at the end of the
        array, so bracketed prose before or after it is ignored.
        """
        found_array = False
        start = text.find("[")
        while start != -1:
            try:
                data, _ = self.DECODER.raw_decode(text, start)
            except json.JSONDecodeError:
                data = None
            if isinstance(data, list):
                found_array = True
                if all(isinstance(k, str) for k in data):
                    return [k.strip() for k in data if k.strip()]
            start = text.find("[", start + 1)

        if found_array:
            raise ParsingError("Keyword response must be a JSON array of strings")
        raise ParsingError("Keyword response contains no JSON array")
