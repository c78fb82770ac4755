"""Timing of matching operations."""

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import time
from typing import Iterator

log = logging.getLogger(__name__)


def _now() -> float:
    return time.perf_counter()


@dataclass(frozen=True)
class ProfileRecord:
    operation: str
    duration: float
    timestamp: float


@dataclass(frozen=True)
class OperationStats:
    count: int
    total: float
    average: float
    maximum: float


class Profiler:
    """Collects per-operation durations when enabled."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self._records: list[ProfileRecord] = []

    @contextmanager
    def profile(self, operation: str) -> Iterator[None]:
        """Time the enclosed block under ``operation``."""
        if not self.enabled:
            yield
            return

        t0 = _now()
        try:
            yield
        finally:
            duration = _now() - t0
            self._records.append(
                ProfileRecord(operation=operation, duration=duration, timestamp=time.time())
            )
            log.debug(f"TIMER {operation} took {duration * 1000:.3f} ms")

    def results(self) -> list[ProfileRecord]:
        return list(self._records)

    def summary(self) -> dict[str, OperationStats]:
        """Aggregate recorded durations by operation."""
        grouped: dict[str, list[float]] = {}
        for record in self._records:
            grouped.setdefault(record.operation, []).append(record.duration)

        return {
            operation: OperationStats(
                count=len(durations),
                total=sum(durations),
                average=sum(durations) / len(durations),
                maximum=max(durations),
            )
            for operation, durations in grouped.items()
        }

    def format_summary(self) -> str:
        lines = ["Profile Summary:"]
        ordered = sorted(self.summary().items(), key=lambda item: -item[1].total)
        for operation, stats in ordered:
            lines.append(
                f"  {operation}: {stats.count} calls, total {stats.total * 1000:.2f} ms, "
                f"avg {stats.average * 1000:.2f} ms, max {stats.maximum * 1000:.2f} ms"
            )
        return "\n".join(lines)

    def clear(self) -> None:
        self._records.clear()
