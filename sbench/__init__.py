"""sbench - simple microbenchmarks with Nagios-style threshold classification."""

from .cli import main
from .models import (
    BenchmarkParameters,
    BenchmarkResult,
    PingThresholds,
    Thresholds,
    Verdict,
    WorkerResult,
)
from .pool import WorkerPool


__version__ = "1.0.0"

__all__ = [
    "BenchmarkParameters",
    "BenchmarkResult",
    "PingThresholds",
    "Thresholds",
    "Verdict",
    "WorkerPool",
    "WorkerResult",
    "main",
]
