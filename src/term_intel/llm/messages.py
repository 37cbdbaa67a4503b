"""
Chat request and response types shared by model clients.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Protocol


class Role(str, Enum):
    """Message roles in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """A message in a conversation."""

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(Role.USER, content)

    def to_dict(self) -> dict:
        """Convert to dictionary format for chat APIs."""
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class ChatOptions:
    """
    Decoding options for a chat request.

    The defaults select greedy, reproducible decoding.
    """

    temperature: float = 0.0
    top_p: float = 1.0
    top_k: int = 1
    num_ctx: int | None = None

    def to_dict(self) -> dict:
        """Convert to the options mapping understood by Ollama."""
        options = {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
        }
        if self.num_ctx is not None:
            options["num_ctx"] = self.num_ctx
        return options


@dataclass(frozen=True)
class ChatRequest:
    """A structured chat request: model, ordered messages, decoding options."""

    model: str
    messages: tuple[ChatMessage, ...]
    options: ChatOptions = field(default_factory=ChatOptions)

    def to_payload(self, stream: bool = True) -> dict:
        """Build the JSON body for a chat call."""
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "stream": stream,
            "options": self.options.to_dict(),
        }


@dataclass(frozen=True)
class ChatChunk:
    """One incremental piece of a streamed model response."""

    content: str | None = None
    done: bool = False


class ChatClient(Protocol):
    """Protocol for generative model clients."""

    def chat(self, request: ChatRequest) -> AsyncIterator[ChatChunk]: ...
