"""
Synthesis stage: turns retrieved evidence into an Understanding.

The model is asked for a fenced JSON block; its streamed reply is
accumulated, the block extracted, decoded and validated.
"""

from contextlib import aclosing
from enum import Enum

from term_intel.comprehension.models import Understanding
from term_intel.comprehension.parsing import parse_analysis
from term_intel.core.exceptions import ComprehensionError, ModelError
from term_intel.llm import ChatClient, ChatOptions, ChatRequest, ComprehensionPrompts
from term_intel.llm.response import extract_code_block
from term_intel.utils.logging import get_logger
from term_intel.utils.metrics import time_llm_call

logger = get_logger(__name__)


class SynthesisState(str, Enum):
    """Progress of one synthesis run."""

    BUILT = "built"
    STREAMING = "streaming"
    ACCUMULATED = "accumulated"
    EXTRACTED = "extracted"
    PARSED = "parsed"
    DONE = "done"
    FAILED = "failed"


class Synthesizer:
    """
    Produces an Understanding from a query, its keywords and evidence.

    Decoding is greedy (temperature 0, top_p 1, top_k 1) so repeated
    runs over the same evidence give the same answer.

    Example:
        >>> synthesizer = Synthesizer(OllamaClient(), model="llama3.2:latest")
        >>> understanding = await synthesizer.synthesize(
        ...     "What is quantum entanglement?",
        ...     ["quantum", "entanglement"],
        ...     evidence,
        ... )
    """

    OPTIONS = ChatOptions(temperature=0.0, top_p=1.0, top_k=1)

    def __init__(self, client: ChatClient, model: str = "llama3.2:latest") -> None:
        self.client = client
        self.model = model

    def build_request(self, query: str, keywords: list[str], evidence: str) -> ChatRequest:
        """Build the analysis request for the model."""
        messages = ComprehensionPrompts.ANALYZE.messages(
            query=query,
            keywords=", ".join(keywords),
            search_results=evidence,
        )
        return ChatRequest(model=self.model, messages=messages, options=self.OPTIONS)

    async def accumulate(self, request: ChatRequest) -> str:
        """
        Stream the model response and concatenate its chunks.

        The stream is closed as soon as this coroutine exits, including
        on error or cancellation.

        Raises:
            ModelError: If the client or its stream fails
        """
        parts = []
        try:
            with time_llm_call():
                async with aclosing(self.client.chat(request)) as stream:
                    async for chunk in stream:
                        if chunk.content:
                            parts.append(chunk.content)
        except Exception as e:
            raise ModelError.wrap(e, "Model request failed", model=self.model)

        return "".join(parts)

    async def synthesize(
        self,
        query: str,
        keywords: list[str],
        evidence: str,
    ) -> Understanding:
        """
        Run the synthesis stage.

        Args:
            query: Original query, echoed in the result
            keywords: Keywords used for the search
            evidence: Plain-text search results (may be empty)

        Returns:
            Understanding built from the model's analysis

        Raises:
            ModelError: If the model call fails
            ParsingError: If the response cannot be decoded
        """
        request = self.build_request(query, keywords, evidence)
        state = SynthesisState.BUILT

        try:
            state = SynthesisState.STREAMING
            response = await self.accumulate(request)
            state = SynthesisState.ACCUMULATED
            logger.debug(f"Accumulated {len(response)} chars from {self.model}")

            block = extract_code_block(response)
            state = SynthesisState.EXTRACTED

            result = parse_analysis(block)
            state = SynthesisState.PARSED

            understanding = Understanding.from_analysis(query, result)
            state = SynthesisState.DONE
        except Exception as e:
            logger.debug(f"Synthesis {SynthesisState.FAILED.value} while {state.value}")
            if isinstance(e, ComprehensionError):
                e.details.setdefault("state", state.value)
                raise
            raise ModelError.wrap(
                e, "Synthesis failed", model=self.model, state=state.value
            )

        return understanding
