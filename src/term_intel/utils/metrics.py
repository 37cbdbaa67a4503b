"""
In-memory pipeline metrics.

Each pipeline stage (search fetch, model call, full comprehension)
reports a call counter, an error counter and a latency distribution.
Nothing is exported; callers read snapshot() or summary().
"""

import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import ContextManager, Iterator


class Stage(str, Enum):
    """Pipeline stages that report metrics."""

    SEARCH = "search"
    LLM = "llm"
    COMPREHENSION = "comprehension"


# stage -> (call counter, error counter, latency timing)
STAGE_METRICS: dict[Stage, tuple[str, str, str]] = {
    Stage.SEARCH: ("searches", "search_errors", "search_latency_ms"),
    Stage.LLM: ("llm_calls", "llm_errors", "llm_latency_ms"),
    Stage.COMPREHENSION: (
        "comprehensions",
        "comprehension_errors",
        "comprehension_latency_ms",
    ),
}


@dataclass
class TimingStats:
    """Running latency statistics in milliseconds."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def record(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)

    def copy(self) -> "TimingStats":
        return TimingStats(self.count, self.total_ms, self.min_ms, self.max_ms)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "total_ms": round(self.total_ms, 2),
            "avg_ms": round(self.avg_ms, 2),
            "min_ms": round(self.min_ms, 2) if self.count else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


@dataclass
class Metrics:
    """
    Process-wide counters and timings.

    All access goes through a lock, so concurrent comprehend() calls
    (or threads running their own event loops) can report safely.

    Example:
        >>> with track_stage(Stage.SEARCH):
        ...     response = await transport.get(url)
        >>> Metrics.get().get_counter("searches")
        1
    """

    _counters: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _timings: dict[str, TimingStats] = field(
        default_factory=lambda: defaultdict(TimingStats)
    )
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def get(cls) -> "Metrics":
        """Return the process-wide instance, creating it on first use."""
        global _instance
        with _instance_lock:
            if _instance is None:
                _instance = cls()
            return _instance

    @classmethod
    def reset(cls) -> None:
        """Clear every counter and timing (used by tests)."""
        if _instance is not None:
            with _instance._lock:
                _instance._counters.clear()
                _instance._timings.clear()

    def increment(self, name: str, value: int = 1) -> int:
        """Add value to a counter and return the new total."""
        with self._lock:
            self._counters[name] += value
            return self._counters[name]

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def observe(self, name: str, duration_ms: float) -> None:
        with self._lock:
            self._timings[name].record(duration_ms)

    def get_timing(self, name: str) -> TimingStats | None:
        """Copy of a timing's statistics, or None if never observed."""
        with self._lock:
            stats = self._timings.get(name)
            return stats.copy() if stats is not None else None

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Observe the duration of the block, even when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(name, (time.perf_counter() - start) * 1000)

    def snapshot(self) -> dict:
        """All counters and timings as plain dictionaries."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "timings": {
                    name: stats.to_dict() for name, stats in self._timings.items()
                },
            }

    def summary(self) -> str:
        """
        Human-readable report: one line per pipeline stage that ran,
        then any other counters and timings.
        """
        snap = self.snapshot()
        counters = dict(snap["counters"])
        timings = dict(snap["timings"])
        lines = ["Pipeline metrics:"]

        for stage, (calls, errors, latency) in STAGE_METRICS.items():
            if calls not in counters:
                continue
            stats = timings.pop(latency, TimingStats().to_dict())
            lines.append(
                f"  {stage.value}: {counters.pop(calls)} calls, "
                f"{counters.pop(errors, 0)} errors, "
                f"latency avg {stats['avg_ms']:.1f}ms "
                f"(min {stats['min_ms']:.1f}ms, max {stats['max_ms']:.1f}ms)"
            )

        lines.extend(f"  {name}: {value}" for name, value in sorted(counters.items()))
        lines.extend(
            f"  {name}: {stats['count']} observations, avg {stats['avg_ms']:.1f}ms"
            for name, stats in sorted(timings.items())
        )
        return "\n".join(lines)


_instance: Metrics | None = None
_instance_lock = threading.Lock()


@contextmanager
def track_stage(stage: Stage) -> Iterator[None]:
    """
    Count, time and error-count one execution of a pipeline stage.

    Only Exception subclasses count as errors; cancellation does not.
    """
    calls, errors, latency = STAGE_METRICS[stage]
    metrics = Metrics.get()
    metrics.increment(calls)
    try:
        with metrics.timer(latency):
            yield
    except Exception:
        metrics.increment(errors)
        raise


def time_search() -> ContextManager[None]:
    """Track a search fetch."""
    return track_stage(Stage.SEARCH)


def time_llm_call() -> ContextManager[None]:
    """Track a model call, including the whole response stream."""
    return track_stage(Stage.LLM)


def time_comprehension() -> ContextManager[None]:
    """Track a full pipeline run."""
    return track_stage(Stage.COMPREHENSION)
