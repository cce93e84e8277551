"""CPU benchmark."""

from __future__ import annotations

import logging
import math
import time

from ..models import BenchmarkParameters
from .base import PooledBenchmark
from .types import BenchmarkType


logger = logging.getLogger(__name__)


def burn_cpu(times: int) -> float:
    """Do ``times`` rounds of two dependent powers and return the final value.

    Every round consumes the previous result, so no iteration can be skipped
    or reordered.
    """
    x = 2.0
    for _ in range(times):
        x = math.pow(x, x)
        x = math.pow(x, 1 / (x - 1))
    return x


class CpuBenchmark(PooledBenchmark[None]):
    benchmark_type = BenchmarkType.CPU
    description = "Floating-point power calculus keeping one core per worker busy"
    params_usage = "times"

    def run_worker(self, params: BenchmarkParameters, index: int, context: None) -> float:
        logger.debug("Thread #%d will perform %d calculus", index, params.times)
        start = time.perf_counter()
        burn_cpu(params.times)
        return time.perf_counter() - start
