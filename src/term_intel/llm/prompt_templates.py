"""
Prompt templates for LLM operations.

Provides structured prompts for:
- Keyword extraction from a query
- Analysis of search evidence into a structured understanding
"""

from dataclasses import dataclass
from typing import Any

from term_intel.llm.messages import ChatMessage


@dataclass(frozen=True)
class PromptTemplate:
    """
    A reusable prompt template with variable substitution.

    Example:
        >>> template = PromptTemplate(
        ...     name="define",
        ...     system="You are a helpful assistant.",
        ...     user="Define {term}.",
        ... )
        >>> messages = template.messages(term="qubit")
    """

    name: str
    system: str
    user: str

    def format_user(self, **kwargs: Any) -> str:
        """Format just the user prompt."""
        return self.user.format(**kwargs) if kwargs else self.user

    def messages(self, **kwargs: Any) -> tuple[ChatMessage, ...]:
        """
        Build the system and user messages for this template.

        Args:
            **kwargs: Variables substituted into the user prompt

        Returns:
            Tuple of (system message, user message)
        """
        return (
            ChatMessage.system(self.system),
            ChatMessage.user(self.format_user(**kwargs)),
        )


class ComprehensionPrompts:
    """Prompt templates for the comprehension pipeline."""

    # Literal braces in the JSON example must stay unformatted, so the
    # system prompt is never passed through str.format.
    ANALYZE = PromptTemplate(
        name="analyze",
        system=(
            "Analyze the provided search results and create a comprehensive understanding.\n"
            "Result must be in the **same language as the input query**\n"
            "Respond in the following JSON format:\n"
            "```json\n"
            "{\n"
            '    "definition": "Clear and concise definition",\n'
            '    "category": "General category or type",\n'
            '    "concepts": ["concept1", "concept2"],\n'
            '    "confidence": float between 0-1\n'
            "}\n"
            "```"
        ),
        user=(
            "Query: {query}\n"
            "Keywords: {keywords}\n"
            "\n"
            "Search Results:\n"
            "{search_results}"
        ),
    )

    EXTRACT_KEYWORDS = PromptTemplate(
        name="extract_keywords",
        system=(
            "You are a keyword extraction assistant. "
            "Identify the terms a web search needs to explain the query, "
            "most important first. Keep the language of the query. "
            "Respond only with a JSON array of strings inside a ```json block."
        ),
        user=(
            "Extract at most {max_keywords} search keywords from this query:\n\n"
            "---\n{query}\n---"
        ),
    )
