"""Memory benchmark: allocate, commit and free heap blocks."""

from __future__ import annotations

import logging
import time

from ..errors import BenchmarkError
from ..models import BenchmarkParameters
from .base import SENTINEL_BYTE, PooledBenchmark
from .types import BenchmarkType


logger = logging.getLogger(__name__)


def allocate_filled(size_in_bytes: int) -> bytes:
    """Allocate ``size_in_bytes`` and write the sentinel into every byte.

    Writing each byte forces the pages to be committed instead of only
    reserved.
    """
    try:
        return SENTINEL_BYTE * size_in_bytes
    except MemoryError as exc:
        raise BenchmarkError(f"Can't allocate {size_in_bytes} bytes on memory") from exc


class MemoryBenchmark(PooledBenchmark[None]):
    benchmark_type = BenchmarkType.MEM
    description = "Allocate, fill with a sentinel byte and free a heap block"
    params_usage = "times,sizeInBytes"

    def run_worker(self, params: BenchmarkParameters, index: int, context: None) -> float:
        verbose = logger.isEnabledFor(logging.DEBUG)
        start = time.perf_counter()
        for i in range(params.times):
            before = time.perf_counter()
            block = allocate_filled(params.size_in_bytes)
            allocated = time.perf_counter()
            del block
            if verbose:
                freed = time.perf_counter()
                logger.debug(
                    "Worker #%d iteration %d: malloc+memset %f s, free %f s",
                    index,
                    i,
                    allocated - before,
                    freed - allocated,
                )
        return time.perf_counter() - start
