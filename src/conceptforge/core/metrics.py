"""
Performance tracking for concept processing.
"""

import time
from dataclasses import dataclass, field


@dataclass
class PerformanceMetrics:
    """Snapshot of a tracker. Times are in milliseconds."""

    total_time: float
    extension_times: dict[str, float] = field(default_factory=dict)
    concept_count: int = 0


class PerformanceTracker:
    """
    Wall-clock timings per pipeline stage or extension.

    ``start()`` resets everything, so one tracker can be reused across
    render calls on a long-lived engine.
    """

    def __init__(self) -> None:
        self._start_time = 0.0
        self._extension_times: dict[str, float] = {}
        self._extension_starts: dict[str, float] = {}
        self._concept_count = 0

    def start(self) -> None:
        self._start_time = time.perf_counter()
        self._extension_times = {}
        self._extension_starts = {}
        self._concept_count = 0

    def start_extension(self, key: str) -> None:
        self._extension_starts[key] = time.perf_counter()

    def end_extension(self, key: str) -> None:
        started = self._extension_starts.pop(key, None)
        if started is None:
            return
        elapsed = (time.perf_counter() - started) * 1000
        self._extension_times[key] = self._extension_times.get(key, 0.0) + elapsed

    def increment_concept_count(self, amount: int = 1) -> None:
        self._concept_count += amount

    def get_metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            total_time=(time.perf_counter() - self._start_time) * 1000,
            extension_times=dict(self._extension_times),
            concept_count=self._concept_count,
        )

    def format_metrics(self) -> str:
        metrics = self.get_metrics()
        lines = [
            f"Total Processing Time: {metrics.total_time:.2f}ms",
            f"Concepts Processed: {metrics.concept_count}",
        ]
        if metrics.extension_times:
            lines.append("\nExtension Performance:")
            for key, elapsed in metrics.extension_times.items():
                share = (elapsed / metrics.total_time * 100) if metrics.total_time else 0.0
                lines.append(f"  {key}: {elapsed:.2f}ms ({share:.1f}%)")
        return "\n".join(lines)
