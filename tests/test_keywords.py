"""
Tests for keyword extraction.
"""

import pytest

from term_intel.config import Settings
from term_intel.core.exceptions import ModelError, ParsingError
from term_intel.keywords import LLMKeywordExtractor, RuleKeywordExtractor
from term_intel.utils.metrics import Metrics
from tests.conftest import FakeChatClient


class TestRuleKeywordExtractor:
    """Tests for stop-word based extraction."""

    @pytest.mark.asyncio
    async def test_question_words_dropped(self):
        keywords = await RuleKeywordExtractor().extract("What is quantum entanglement?")

        assert keywords == ["quantum", "entanglement"]

    @pytest.mark.asyncio
    async def test_quoted_phrase_first(self):
        keywords = await RuleKeywordExtractor().extract(
            'Explain the meaning of "dark matter" in cosmology'
        )

        assert keywords == ["dark matter", "cosmology"]

    @pytest.mark.asyncio
    async def test_japanese_quotes(self):
        keywords = await RuleKeywordExtractor().extract("「量子もつれ」とは")

        assert keywords[0] == "量子もつれ"

    @pytest.mark.asyncio
    async def test_non_ascii_kept(self):
        keywords = await RuleKeywordExtractor().extract("量子もつれ")

        assert keywords == ["量子もつれ"]

    @pytest.mark.asyncio
    async def test_short_words_and_digits_dropped(self):
        keywords = await RuleKeywordExtractor().extract("AI in 2024 and ML ops")

        assert keywords == ["ops"]

    @pytest.mark.asyncio
    async def test_hyphenated_compounds(self):
        keywords = await RuleKeywordExtractor().extract("What is peer-to-peer networking?")

        assert keywords == ["peer-to-peer", "networking"]

    @pytest.mark.asyncio
    async def test_deduplicated(self):
        keywords = await RuleKeywordExtractor().extract("Python python PYTHON typing")

        assert keywords == ["python", "typing"]

    @pytest.mark.asyncio
    async def test_max_keywords(self):
        extractor = RuleKeywordExtractor(max_keywords=2)

        keywords = await extractor.extract("alpha beta gamma delta")

        assert keywords == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_only_stop_words(self):
        assert await RuleKeywordExtractor().extract("what is it?") == []

    def test_from_settings(self):
        settings = Settings(keywords={"max_keywords": 3})

        assert RuleKeywordExtractor.from_settings(settings).max_keywords == 3


class TestLLMKeywordExtractor:
    """Tests for model-backed extraction."""

    @pytest.mark.asyncio
    async def test_parses_fenced_array(self):
        client = FakeChatClient(chunks=["```json\n", '["quantum", ', '"entanglement"]\n```'])
        extractor = LLMKeywordExtractor(client, model="test-model")

        keywords = await extractor.extract("What is quantum entanglement?")

        assert keywords == ["quantum", "entanglement"]
        assert client.closed
        assert Metrics.get().get_counter("llm_calls") == 1

    @pytest.mark.asyncio
    async def test_request_shape(self):
        client = FakeChatClient(chunks=['["qubit"]'])
        extractor = LLMKeywordExtractor(client, model="test-model", max_keywords=4)

        await extractor.extract("What is a qubit?")

        request = client.requests[0]
        assert request.model == "test-model"
        assert request.options.temperature == 0.0
        assert request.options.top_k == 1
        assert "What is a qubit?" in request.messages[1].content
        assert "at most 4" in request.messages[1].content

    @pytest.mark.asyncio
    async def test_bare_array_in_prose(self):
        client = FakeChatClient(chunks=['Keywords: ["a b", " ", "c"] done'])

        keywords = await LLMKeywordExtractor(client).extract("query")

        assert keywords == ["a b", "c"]

    @pytest.mark.asyncio
    async def test_trailing_brackets_ignored(self):
        client = FakeChatClient(chunks=['["quantum", "entanglement"]\n(see [1] for details)'])

        keywords = await LLMKeywordExtractor(client).extract("query")

        assert keywords == ["quantum", "entanglement"]

    @pytest.mark.asyncio
    async def test_leading_citation_skipped(self):
        client = FakeChatClient(chunks=['Per [1] and [note]: ["qubit", "superposition"]'])

        keywords = await LLMKeywordExtractor(client).extract("query")

        assert keywords == ["qubit", "superposition"]

    @pytest.mark.asyncio
    async def test_no_array(self):
        client = FakeChatClient(chunks=["I cannot help with that."])

        with pytest.raises(ParsingError):
            await LLMKeywordExtractor(client).extract("query")

    @pytest.mark.asyncio
    async def test_not_strings(self):
        client = FakeChatClient(chunks=["[1, 2, 3]"])

        with pytest.raises(ParsingError):
            await LLMKeywordExtractor(client).extract("query")

    @pytest.mark.asyncio
    async def test_client_failure(self):
        client = FakeChatClient(error=ConnectionError("refused"))

        with pytest.raises(ModelError) as exc_info:
            await LLMKeywordExtractor(client, model="test-model").extract("query")

        assert exc_info.value.model == "test-model"
        assert client.closed
