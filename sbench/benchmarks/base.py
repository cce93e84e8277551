"""Base definitions for benchmarks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from ..aggregation import aggregate, mean_seconds
from ..models import BenchmarkParameters, BenchmarkResult
from ..pool import WorkerPool
from ..utils import check_requirements
from .types import BenchmarkType


logger = logging.getLogger(__name__)

# Default constants
DEFAULT_HTTP_REFS_FOLDER = Path("/var/lib/sbench/http_refs")
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_PING_PROVIDER = "command"
SENTINEL_BYTE = b"\xa5"

ContextT = TypeVar("ContextT")


class BenchmarkBase(ABC):
    """Base class for all benchmarks."""

    benchmark_type: BenchmarkType
    description: str
    params_usage: str
    _required_commands: ClassVar[tuple[str, ...]] = ()

    @property
    def name(self) -> str:
        return self.benchmark_type.value

    def validate(self) -> tuple[bool, str]:
        """Check if benchmark can run."""
        if self._required_commands:
            return check_requirements(self._required_commands)
        return True, ""

    @abstractmethod
    def execute(self, params: BenchmarkParameters) -> BenchmarkResult:
        """Execute the benchmark."""


class PooledBenchmark(BenchmarkBase, Generic[ContextT]):
    """Benchmark whose timed operation runs on every worker of a WorkerPool.

    ``prepare`` runs once on the calling thread before any worker starts and
    returns read-only state shared by the workers. ``run_worker`` performs all
    iterations for one worker and returns its elapsed seconds.
    """

    def prepare(self, params: BenchmarkParameters) -> ContextT | None:
        return None

    @abstractmethod
    def run_worker(self, params: BenchmarkParameters, index: int, context: ContextT | None) -> float:
        """Run ``params.times`` iterations and return the elapsed seconds."""

    def execute(self, params: BenchmarkParameters) -> BenchmarkResult:
        context = self.prepare(params)
        pool = WorkerPool(params.n_threads, name=f"sbench-{self.name}")
        workers = pool.run(lambda index: self.run_worker(params, index, context))
        seconds = mean_seconds(workers)
        logger.debug("%s: average delta over %d workers = %f s", self.name, len(workers), seconds)
        return BenchmarkResult(
            benchmark_type=self.benchmark_type,
            metric=aggregate(self.benchmark_type, workers, params.times),
            mean_seconds=seconds,
            parameters=params,
            workers=tuple(workers),
        )
