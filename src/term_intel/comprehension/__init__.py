"""
Comprehension module for term-intel.

Provides the query comprehension pipeline:
- Configuration and result models
- Structured analysis parsing
- Streaming synthesis of search evidence
- Orchestration of all stages
"""

from term_intel.comprehension.models import (
    Configuration,
    AnalysisResult,
    Understanding,
)
from term_intel.comprehension.parsing import parse_analysis
from term_intel.comprehension.synthesizer import Synthesizer, SynthesisState
from term_intel.comprehension.pipeline import (
    Comprehender,
    comprehend,
    validate_query,
)

__all__ = [
    # Models
    "Configuration",
    "AnalysisResult",
    "Understanding",
    # Parsing
    "parse_analysis",
    # Synthesis
    "Synthesizer",
    "SynthesisState",
    # Pipeline
    "Comprehender",
    "comprehend",
    "validate_query",
]
