"""Reduce per-worker timings to the metric a benchmark publishes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .benchmarks.types import BenchmarkType
from .models import WorkerResult


def _mean(values: Iterable[float]) -> float:
    """Arithmetic mean; raises ValueError for an empty iterable."""
    numbers = list(values)
    if not numbers:
        raise ValueError("Cannot average an empty set of worker results")
    return sum(numbers) / len(numbers)


def throughput(times: int, seconds: float) -> float:
    """Iterations per second for one worker."""
    if seconds <= 0:
        return float("inf")
    return times / seconds


def mean_seconds(results: Sequence[WorkerResult]) -> float:
    """Average elapsed time of the workers."""
    return _mean(result.seconds for result in results)


def mean_throughput(results: Sequence[WorkerResult], times: int) -> float:
    """Average calculations per second per worker."""
    return _mean(throughput(times, result.seconds) for result in results)


def aggregate(benchmark_type: BenchmarkType, results: Sequence[WorkerResult], times: int) -> float:
    """Metric handed to the threshold classifier for a pooled benchmark.

    Workers run concurrently, so the mean is what a single worker experiences
    under contention. CPU publishes throughput instead of seconds.
    """
    if benchmark_type == BenchmarkType.CPU:
        return mean_throughput(results, times)
    return mean_seconds(results)
