"""
Data model for the comprehension pipeline.

Configuration for one invocation, the decoded model analysis and the
final Understanding returned to callers.
"""

import logging
import math
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from term_intel.config import Settings
from term_intel.core.exceptions import ParsingError


@dataclass(frozen=True)
class Configuration:
    """
    Per-invocation pipeline configuration.

    Attributes:
        model: Model identifier sent with the synthesis request
        search_limit: Number of search results requested (positive)
        logger: Optional sink for pipeline trace events
        language: Interface language override; None uses the process locale
    """

    model: str = "llama3.2:latest"
    search_limit: int = 10
    logger: logging.Logger | None = field(
        default=None, compare=False, repr=False
    )
    language: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.search_limit, bool) or not isinstance(self.search_limit, int):
            raise ValueError(f"search_limit must be an integer, got {self.search_limit!r}")
        if self.search_limit < 1:
            raise ValueError(f"search_limit must be positive, got {self.search_limit}")
        if not self.model or not self.model.strip():
            raise ValueError("model must be a non-empty identifier")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: logging.Logger | None = None,
    ) -> "Configuration":
        """Build a Configuration from application settings."""
        return cls(
            model=settings.llm.model,
            search_limit=settings.search.limit,
            logger=logger,
            language=settings.search.language,
        )


class AnalysisResult(BaseModel):
    """
    Structured analysis as reported by the model.

    Decoding is strict: every field is required and must already have
    the declared JSON type. Unknown keys are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    definition: str
    category: str
    concepts: list[str]
    confidence: float


@dataclass(frozen=True)
class Understanding:
    """
    Final result of a comprehension run.

    Example:
        >>> understanding = await comprehend("What is quantum entanglement?")
        >>> print(understanding.category)
        Physics
        >>> print(understanding)
    """

    query: str
    definition: str
    category: str
    concepts: tuple[str, ...]
    confidence: float

    @classmethod
    def from_analysis(cls, query: str, result: AnalysisResult) -> "Understanding":
        """
        Combine the original query with a decoded analysis.

        Raises:
            ParsingError: If the confidence lies outside [0, 1]
        """
        confidence = result.confidence
        if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
            raise ParsingError(
                "Confidence must be between 0 and 1",
                details={"confidence": confidence},
            )

        return cls(
            query=query,
            definition=result.definition,
            category=result.category,
            concepts=tuple(result.concepts),
            confidence=confidence,
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "query": self.query,
            "definition": self.definition,
            "category": self.category,
            "concepts": list(self.concepts),
            "confidence": self.confidence,
        }

    def __str__(self) -> str:
        lines = [
            f"Definition: {self.definition}",
            f"Category: {self.category}",
        ]
        if self.concepts:
            lines.append(f"Related Concepts: {', '.join(self.concepts)}")
        lines.append(f"Confidence: {self.confidence * 100:.1f}%")
        return "\n".join(lines)
