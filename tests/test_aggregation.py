"""Tests for sbench/aggregation.py."""

from __future__ import annotations

import math

import pytest

from sbench.aggregation import aggregate, mean_seconds, mean_throughput, throughput
from sbench.benchmarks import BenchmarkType
from sbench.models import WorkerResult


def _workers(*seconds: float) -> list[WorkerResult]:
    return [WorkerResult(index=i, seconds=s) for i, s in enumerate(seconds)]


def test_mean_seconds_is_arithmetic_mean() -> None:
    assert mean_seconds(_workers(1.0, 2.0, 3.0, 6.0)) == pytest.approx(3.0)


def test_mean_seconds_rejects_empty() -> None:
    with pytest.raises(ValueError):
        mean_seconds([])


def test_mean_throughput_averages_per_worker_rates() -> None:
    # 1000 iterations in 1 s and in 4 s: (1000 + 250) / 2
    assert mean_throughput(_workers(1.0, 4.0), times=1000) == pytest.approx(625.0)


def test_throughput_of_zero_elapsed_time_is_infinite() -> None:
    assert math.isinf(throughput(10, 0.0))


def test_cpu_publishes_throughput() -> None:
    assert aggregate(BenchmarkType.CPU, _workers(2.0), times=100) == pytest.approx(50.0)


@pytest.mark.parametrize(
    "benchmark_type",
    [BenchmarkType.MEM, BenchmarkType.DISK_W, BenchmarkType.DISK_R_SEQ, BenchmarkType.DISK_R_RAN],
)
def test_other_pooled_kinds_publish_mean_seconds(benchmark_type: BenchmarkType) -> None:
    assert aggregate(benchmark_type, _workers(0.5, 1.5), times=100) == pytest.approx(1.0)
