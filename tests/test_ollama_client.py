"""
Tests for the Ollama streaming chat client.

Uses httpx.MockTransport so no server is needed.
"""

import json

import httpx
import pytest

from term_intel.config import Settings
from term_intel.core.exceptions import ModelError
from term_intel.llm import ChatMessage, ChatOptions, ChatRequest, OllamaClient


def ndjson(*objects: dict) -> bytes:
    return "".join(json.dumps(obj) + "\n" for obj in objects).encode("utf-8")


def make_request(**options) -> ChatRequest:
    return ChatRequest(
        model="llama3.2:latest",
        messages=(ChatMessage.system("Be brief."), ChatMessage.user("Define qubit")),
        options=ChatOptions(**options),
    )


async def collect(client: OllamaClient, request: ChatRequest) -> list:
    return [chunk async for chunk in client.chat(request)]


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records whether it was closed."""

    def __init__(self, body: bytes) -> None:
        self.body = body
        self.closed = False

    async def __aiter__(self):
        for line in self.body.splitlines(keepends=True):
            yield line

    async def aclose(self) -> None:
        self.closed = True


class TestOllamaClient:
    """Tests for OllamaClient."""

    @pytest.mark.asyncio
    async def test_streams_chunks(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, content=ndjson(
                {"message": {"role": "assistant", "content": "A qubit "}, "done": False},
                {"message": {"role": "assistant", "content": "is a unit."}, "done": False},
                {"message": {"role": "assistant", "content": ""}, "done": True},
            ))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = OllamaClient(base_url="http://ollama:11434/", client=http)
            chunks = await collect(client, make_request())

        assert [c.content for c in chunks] == ["A qubit ", "is a unit.", ""]
        assert chunks[-1].done
        assert captured["url"] == "http://ollama:11434/api/chat"
        assert captured["payload"] == {
            "model": "llama3.2:latest",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Define qubit"},
            ],
            "stream": True,
            "options": {"temperature": 0.0, "top_p": 1.0, "top_k": 1},
        }

    @pytest.mark.asyncio
    async def test_closing_chat_closes_response(self):
        """Closing the chunk iterator early releases the HTTP response."""
        body = TrackingStream(ndjson(
            {"message": {"role": "assistant", "content": "A qubit "}, "done": False},
            {"message": {"role": "assistant", "content": "is a unit."}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": True},
        ))

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=body)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = OllamaClient(client=http)
            chunks = client.chat(make_request())

            first = await chunks.__anext__()
            await chunks.aclose()

            assert first.content == "A qubit "
            assert body.closed

    @pytest.mark.asyncio
    async def test_num_ctx_from_client(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, content=ndjson({"message": {"content": "ok"}, "done": True}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = OllamaClient(num_ctx=8192, client=http)
            await collect(client, make_request())

        assert captured["payload"]["options"]["num_ctx"] == 8192

    @pytest.mark.asyncio
    async def test_blank_lines_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = b"\n" + ndjson({"message": {"content": "hi"}, "done": True})
            return httpx.Response(200, content=body)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            chunks = await collect(OllamaClient(client=http), make_request())

        assert [c.content for c in chunks] == ["hi"]

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "model 'nope' not found"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(ModelError) as exc_info:
                await collect(OllamaClient(client=http), make_request())

        assert exc_info.value.details["status_code"] == 404
        assert "not found" in exc_info.value.details["body"]
        assert exc_info.value.model == "llama3.2:latest"

    @pytest.mark.asyncio
    async def test_error_line(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=ndjson({"error": "out of memory"}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(ModelError, match="out of memory"):
                await collect(OllamaClient(client=http), make_request())

    @pytest.mark.asyncio
    async def test_malformed_line(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"{not json\n")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(ModelError):
                await collect(OllamaClient(client=http), make_request())

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(ModelError) as exc_info:
                await collect(OllamaClient(client=http), make_request())

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_from_settings(self):
        settings = Settings(llm={"base_url": "http://gpu-box:11434", "num_ctx": 4096})

        client = OllamaClient.from_settings(settings)

        assert client.chat_url == "http://gpu-box:11434/api/chat"
        assert client.num_ctx == 4096
