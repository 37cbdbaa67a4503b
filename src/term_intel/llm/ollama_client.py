"""
Async Ollama chat client.

Streams chat completions from an Ollama server's /api/chat endpoint
as newline-delimited JSON, yielding one ChatChunk per line.
"""

import json
from contextlib import aclosing
from typing import AsyncIterator

import httpx

from term_intel.config import Settings
from term_intel.core.exceptions import ModelError
from term_intel.llm.messages import ChatChunk, ChatOptions, ChatRequest
from term_intel.utils.logging import get_logger

logger = get_logger(__name__)


class OllamaClient:
    """
    Streaming chat client for a local or remote Ollama server.

    Every failure (connection errors, non-success status, malformed
    stream lines, server-reported errors) surfaces as ModelError.

    Example:
        >>> client = OllamaClient()
        >>> request = ChatRequest(
        ...     model="llama3.2:latest",
        ...     messages=(ChatMessage.user("Define qubit"),),
        ... )
        >>> async for chunk in client.chat(request):
        ...     print(chunk.content, end="")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout_seconds: float = 120.0,
        num_ctx: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Ollama server URL
            timeout_seconds: Read timeout while waiting for stream data
            num_ctx: Context window to request when a request leaves it unset
            client: Optional shared httpx client (not closed by this object)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.num_ctx = num_ctx
        self._client = client

        logger.debug(f"OllamaClient initialized (base_url={self.base_url})")

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaClient":
        """
        Create an OllamaClient from application settings.

        Args:
            settings: Application settings

        Returns:
            Configured OllamaClient instance
        """
        return cls(
            base_url=settings.llm.base_url,
            timeout_seconds=settings.llm.timeout_seconds,
            num_ctx=settings.llm.num_ctx,
        )

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    def _payload(self, request: ChatRequest) -> dict:
        if self.num_ctx is not None and request.options.num_ctx is None:
            options = ChatOptions(
                temperature=request.options.temperature,
                top_p=request.options.top_p,
                top_k=request.options.top_k,
                num_ctx=self.num_ctx,
            )
            request = ChatRequest(request.model, request.messages, options)
        return request.to_payload(stream=True)

    async def chat(self, request: ChatRequest) -> AsyncIterator[ChatChunk]:
        """
        Stream a chat response.

        Args:
            request: Chat request to send

        Yields:
            ChatChunk for every line of the response stream

        Raises:
            ModelError: If the request or the stream fails
        """
        payload = self._payload(request)
        timeout = httpx.Timeout(self.timeout_seconds, connect=10.0)

        if self._client is not None:
            async with aclosing(
                self._stream(self._client, payload, request.model, timeout)
            ) as stream:
                async for chunk in stream:
                    yield chunk
            return

        async with httpx.AsyncClient() as client:
            async with aclosing(self._stream(client, payload, request.model, timeout)) as stream:
                async for chunk in stream:
                    yield chunk

    async def _stream(
        self,
        client: httpx.AsyncClient,
        payload: dict,
        model: str,
        timeout: httpx.Timeout,
    ) -> AsyncIterator[ChatChunk]:
        try:
            async with client.stream(
                "POST",
                self.chat_url,
                json=payload,
                timeout=timeout,
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise ModelError(
                        f"Ollama returned HTTP {response.status_code}",
                        model=model,
                        details={"status_code": response.status_code, "body": body[:200]},
                    )

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    chunk = self._parse_line(line, model)
                    yield chunk
                    if chunk.done:
                        break
        except httpx.HTTPError as e:
            logger.error(f"Ollama request failed: {e}")
            raise ModelError.wrap(e, "Model request failed", model=model)

    def _parse_line(self, line: str, model: str) -> ChatChunk:
        """Decode one NDJSON line of an /api/chat stream."""
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ModelError.wrap(e, "Malformed model stream line", model=model)

        if not isinstance(data, dict):
            raise ModelError("Unexpected model stream line", model=model)

        if "error" in data:
            raise ModelError(f"Model reported an error: {data['error']}", model=model)

        message = data.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        return ChatChunk(content=content, done=bool(data.get("done", False)))

    def __repr__(self) -> str:
        return f"OllamaClient(base_url={self.base_url!r})"
