"""
Shared pytest fixtures for term-intel tests.

Provides reusable fixtures for:
- Configuration and settings
- In-memory doubles for every pipeline collaborator
- Sample HTML and model responses
"""

import asyncio
import tempfile
from pathlib import Path
from typing import AsyncIterator, Generator

import pytest

from term_intel.config import Settings, reset_settings
from term_intel.llm import ChatChunk, ChatRequest
from term_intel.search import HttpResponse
from term_intel.utils.metrics import Metrics


@pytest.fixture(autouse=True)
def reset_global_state():
    """
    Reset metrics and cached settings before and after each test.

    This ensures tests are isolated and don't share global state.
    """
    Metrics.reset()
    reset_settings()
    yield
    Metrics.reset()
    reset_settings()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings with small, deterministic values."""
    return Settings(
        llm={"model": "test-model"},
        search={"limit": 5, "language": "en"},
    )


class FakeTransport:
    """Transport double returning a fixed response and recording URLs."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        headers: dict | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.headers = headers if headers is not None else {"Content-Type": "text/html; charset=utf-8"}
        self.error = error
        self.urls: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.urls)

    async def get(self, url: str) -> HttpResponse:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return HttpResponse(
            status_code=self.status_code,
            headers=self.headers,
            body=self.body,
            url=url,
        )


class FakeChatClient:
    """
    Chat client double streaming canned chunks.

    Records every request and whether the last stream was closed.
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        error: Exception | None = None,
        error_after: int | None = None,
        hang_after: int | None = None,
    ) -> None:
        self.chunks = chunks or []
        self.error = error
        self.error_after = error_after
        self.hang_after = hang_after
        self.requests: list[ChatRequest] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def chat(self, request: ChatRequest) -> AsyncIterator[ChatChunk]:
        self.requests.append(request)
        self.closed = False
        try:
            if self.error is not None and self.error_after is None:
                raise self.error
            for i, content in enumerate(self.chunks):
                if self.error is not None and i == self.error_after:
                    raise self.error
                if self.hang_after is not None and i == self.hang_after:
                    await asyncio.Event().wait()
                yield ChatChunk(content=content)
            yield ChatChunk(content=None, done=True)
        finally:
            self.closed = True


class FakeKeywordExtractor:
    """Keyword extractor double returning a fixed list."""

    def __init__(self, keywords: list[str] | None = None, error: Exception | None = None) -> None:
        self.keywords = keywords if keywords is not None else []
        self.error = error
        self.queries: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.queries)

    async def extract(self, query: str) -> list[str]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.keywords)


@pytest.fixture
def sample_html() -> str:
    """Provide a small search results page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>quantum entanglement - Search</title>
        <style>body { color: red; }</style>
        <script>var tracking = "ignore me";</script>
    </head>
    <body>
        <div id="results">
            <h3>Quantum entanglement - Wikipedia</h3>
            <p>Quantum entanglement is the phenomenon of a group of particles
            being generated or interacting such that their quantum states
            cannot be described independently.</p>
            <h3>What Is Quantum Entanglement?</h3>
            <p>Entangled particles remain correlated regardless of distance.</p>
        </div>
        <div hidden>Hidden navigation</div>
    </body>
    </html>
    """


@pytest.fixture
def analysis_json() -> str:
    """Provide a well-formed analysis object."""
    return (
        '{"definition": "A quantum phenomenon where particles share a single state", '
        '"category": "Physics", '
        '"concepts": ["superposition", "Bell inequality"], '
        '"confidence": 0.92}'
    )


@pytest.fixture
def analysis_response(analysis_json: str) -> list[str]:
    """Provide a fenced model response split into stream chunks."""
    text = f"Here is the analysis:\n```json\n{analysis_json}\n```\n"
    return [text[i:i + 17] for i in range(0, len(text), 17)]


@pytest.fixture
def fake_transport(sample_html: str) -> FakeTransport:
    return FakeTransport(body=sample_html.encode("utf-8"))


@pytest.fixture
def fake_chat_client(analysis_response: list[str]) -> FakeChatClient:
    return FakeChatClient(chunks=analysis_response)


@pytest.fixture
def fake_keyword_extractor() -> FakeKeywordExtractor:
    return FakeKeywordExtractor(["quantum", "entanglement"])
