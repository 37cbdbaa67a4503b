"""
LLM module for term-intel.

Provides the chat request types, the Ollama streaming client,
and the prompt templates used by the pipeline.
"""

from term_intel.llm.messages import (
    Role,
    ChatMessage,
    ChatOptions,
    ChatRequest,
    ChatChunk,
    ChatClient,
)
from term_intel.llm.ollama_client import OllamaClient
from term_intel.llm.prompt_templates import (
    PromptTemplate,
    ComprehensionPrompts,
)

__all__ = [
    # Messages
    "Role",
    "ChatMessage",
    "ChatOptions",
    "ChatRequest",
    "ChatChunk",
    "ChatClient",
    # Clients
    "OllamaClient",
    # Prompts
    "PromptTemplate",
    "ComprehensionPrompts",
]
