"""Benchmark modules - all benchmark implementations and registry."""

from __future__ import annotations

from .base import BenchmarkBase, PooledBenchmark
from .cpu import CpuBenchmark
from .io import DiskReadBenchmark, DiskWriteBenchmark
from .memory import MemoryBenchmark
from .network import HttpGetBenchmark
from .ping import PING_PROVIDERS, PingBenchmark, PingProvider, get_ping_provider
from .types import BenchmarkType


# Registry of all benchmarks
ALL_BENCHMARKS: list[BenchmarkBase] = [
    CpuBenchmark(),
    MemoryBenchmark(),
    DiskWriteBenchmark(),
    DiskReadBenchmark(BenchmarkType.DISK_R_SEQ),
    DiskReadBenchmark(BenchmarkType.DISK_R_RAN),
    HttpGetBenchmark(),
    PingBenchmark(),
]

# Create a map from benchmark type to benchmark instance for easy lookup
BENCHMARK_MAP: dict[BenchmarkType, BenchmarkBase] = {bench.benchmark_type: bench for bench in ALL_BENCHMARKS}


def get_benchmark(benchmark_type: BenchmarkType, ping_provider: str | None = None) -> BenchmarkBase:
    """Look up the benchmark for a type, honouring the configured ping provider."""
    if benchmark_type == BenchmarkType.PING and ping_provider is not None:
        return PingBenchmark(get_ping_provider(ping_provider))
    return BENCHMARK_MAP[benchmark_type]


__all__ = [
    "ALL_BENCHMARKS",
    "BENCHMARK_MAP",
    "PING_PROVIDERS",
    "BenchmarkBase",
    "BenchmarkType",
    "CpuBenchmark",
    "DiskReadBenchmark",
    "DiskWriteBenchmark",
    "HttpGetBenchmark",
    "MemoryBenchmark",
    "PingBenchmark",
    "PingProvider",
    "PooledBenchmark",
    "get_benchmark",
    "get_ping_provider",
]
