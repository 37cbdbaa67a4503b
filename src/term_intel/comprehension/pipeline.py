"""
Comprehension pipeline orchestration.

Runs the four stages in order for one query:

1. Input validation
2. Keyword extraction
3. Search retrieval
4. Synthesis

Any stage failure aborts the run with a ComprehensionError subclass.
There is no retry and no partial result.
"""

import logging
from typing import Any

from term_intel.comprehension.models import Configuration, Understanding
from term_intel.comprehension.synthesizer import Synthesizer
from term_intel.config import Settings
from term_intel.core.exceptions import EmptyQueryError, GeneralError
from term_intel.extraction import TextConverter
from term_intel.keywords import KeywordExtractor, LLMKeywordExtractor, RuleKeywordExtractor
from term_intel.llm import ChatClient, OllamaClient
from term_intel.search import HttpxTransport, SearchRetriever, Transport
from term_intel.utils.logging import LoggerAdapter, get_logger_with_context
from term_intel.utils.metrics import time_comprehension


def validate_query(query: str) -> str:
    """
    Validate and trim a query.

    Returns:
        The query without surrounding whitespace

    Raises:
        EmptyQueryError: If nothing remains after trimming
    """
    trimmed = query.strip() if isinstance(query, str) else ""
    if not trimmed:
        raise EmptyQueryError("Empty query provided")
    return trimmed


class Comprehender:
    """
    Wires the pipeline stages together.

    Every collaborator can be replaced; unset ones get the default
    implementation. Nothing is shared between comprehend() calls apart
    from the collaborators themselves.

    Example:
        >>> comprehender = Comprehender(Configuration(search_limit=5))
        >>> understanding = await comprehender.comprehend("What is a qubit?")
        >>> print(understanding.definition)
    """

    def __init__(
        self,
        configuration: Configuration | None = None,
        keyword_extractor: KeywordExtractor | None = None,
        transport: Transport | None = None,
        model_client: ChatClient | None = None,
        converter: TextConverter | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            configuration: Invocation settings (defaults to Configuration())
            keyword_extractor: Keyword source (defaults to RuleKeywordExtractor)
            transport: HTTP transport (defaults to HttpxTransport)
            model_client: Chat model client (defaults to OllamaClient)
            converter: HTML-to-text converter (defaults to HtmlTextConverter)
        """
        self.configuration = configuration or Configuration()
        self.keyword_extractor = keyword_extractor or RuleKeywordExtractor()
        self.model_client = model_client or OllamaClient()

        self.retriever = SearchRetriever(
            transport=transport,
            converter=converter,
            search_limit=self.configuration.search_limit,
            language=self.configuration.language,
        )
        self.synthesizer = Synthesizer(self.model_client, model=self.configuration.model)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: logging.Logger | None = None,
        **overrides: Any,
    ) -> "Comprehender":
        """
        Create a Comprehender from application settings.

        Args:
            settings: Application settings
            logger: Optional trace logger placed in the Configuration
            **overrides: Collaborators to use instead of the configured ones

        Returns:
            Configured Comprehender instance
        """
        configuration = overrides.pop("configuration", None) or Configuration.from_settings(
            settings, logger=logger
        )
        model_client = overrides.pop("model_client", None) or OllamaClient.from_settings(settings)

        keyword_extractor = overrides.pop("keyword_extractor", None)
        if keyword_extractor is None:
            if settings.keywords.strategy == "llm":
                keyword_extractor = LLMKeywordExtractor.from_settings(settings, model_client)
            else:
                keyword_extractor = RuleKeywordExtractor.from_settings(settings)

        transport = overrides.pop("transport", None) or HttpxTransport(
            user_agent=settings.search.user_agent
        )

        return cls(
            configuration=configuration,
            keyword_extractor=keyword_extractor,
            transport=transport,
            model_client=model_client,
            converter=overrides.pop("converter", None),
        )

    async def extract_keywords(
        self,
        query: str,
        trimmed: str,
        trace: LoggerAdapter | None = None,
    ) -> list[str]:
        """
        Run the keyword stage.

        Blank entries are dropped. When nothing is left, the trimmed
        query itself becomes the only keyword.

        Raises:
            GeneralError: If the extractor fails with a foreign exception
        """
        try:
            raw = await self.keyword_extractor.extract(query)
        except Exception as e:
            raise GeneralError.wrap(e, "Keyword extraction failed")

        keywords = [k.strip() for k in raw or [] if isinstance(k, str) and k.strip()]

        if not keywords:
            keywords = [trimmed]
            if trace is not None:
                trace.debug("No keywords extracted, searching for the query text")

        if trace is not None:
            trace.debug(f"Keywords: {', '.join(keywords)}")

        return keywords

    async def comprehend(self, query: str) -> Understanding:
        """
        Comprehend a query.

        Args:
            query: Free-text question or term

        Returns:
            Understanding of the query

        Raises:
            ComprehensionError: Exactly one subclass describing the failure
        """
        base_logger = self.configuration.logger
        trace = (
            get_logger_with_context(base_logger, query=query.strip()[:80])
            if base_logger is not None and isinstance(query, str)
            else None
        )

        try:
            with time_comprehension():
                # No I/O happens for an invalid query
                trimmed = validate_query(query)

                if trace is not None:
                    trace.info("Starting comprehension")

                keywords = await self.extract_keywords(query, trimmed, trace)

                page = await self.retriever.retrieve(keywords)
                if trace is not None:
                    trace.debug(f"Retrieved {len(page.text)} chars from {page.url}")

                understanding = await self.synthesizer.synthesize(query, keywords, page.text)
                if trace is not None:
                    trace.info(
                        f"Comprehension complete (category={understanding.category}, "
                        f"confidence={understanding.confidence:.2f})"
                    )
        except Exception as e:
            error = GeneralError.wrap(e, "Comprehension failed")
            if trace is not None:
                trace.error(f"Comprehension failed [{error.kind.value}]: {error.message}")
            if error is e:
                raise
            raise error

        return understanding


async def comprehend(
    query: str,
    configuration: Configuration | None = None,
    *,
    keyword_extractor: KeywordExtractor | None = None,
    transport: Transport | None = None,
    model_client: ChatClient | None = None,
    converter: TextConverter | None = None,
) -> Understanding:
    """
    Comprehend a query in one call.

    Example:
        >>> understanding = await comprehend("What is quantum entanglement?")
        >>> print(understanding)

    Raises:
        ComprehensionError: Exactly one subclass describing the failure
    """
    comprehender = Comprehender(
        configuration=configuration,
        keyword_extractor=keyword_extractor,
        transport=transport,
        model_client=model_client,
        converter=converter,
    )
    return await comprehender.comprehend(query)
