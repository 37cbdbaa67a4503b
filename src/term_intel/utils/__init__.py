"""
Utilities module for term-intel.

Provides logging setup and in-memory metrics.
"""

from term_intel.utils.logging import (
    setup_logging,
    get_logger,
    get_logger_with_context,
    reset_logging,
)
from term_intel.utils.metrics import (
    Metrics,
    Stage,
    TimingStats,
    track_stage,
    time_search,
    time_llm_call,
    time_comprehension,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_logger_with_context",
    "reset_logging",
    # Metrics
    "Metrics",
    "Stage",
    "TimingStats",
    "track_stage",
    "time_search",
    "time_llm_call",
    "time_comprehension",
]
