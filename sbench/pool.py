"""Run one timed operation on N concurrent workers."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from .errors import BenchmarkError
from .models import WorkerResult


logger = logging.getLogger(__name__)

WorkerOperation = Callable[[int], float]


class WorkerPool:
    """Spawn ``n_threads`` workers, wait for all of them and collect their timings.

    Each worker receives its spawn index and returns the seconds it needed for
    its iterations. A failing worker aborts the whole run: the first failure
    reported is raised as :class:`BenchmarkError` without waiting for the
    remaining workers, which are daemon threads and never keep the process
    alive.
    """

    def __init__(self, n_threads: int, name: str = "sbench-worker"):
        if n_threads < 1:
            raise ValueError(f"n_threads must be >= 1, got {n_threads}")
        self.n_threads = n_threads
        self.name = name

    def run(self, operation: WorkerOperation) -> list[WorkerResult]:
        """Execute ``operation`` once per worker and return results ordered by index."""
        if self.n_threads == 1:
            return [WorkerResult(index=0, seconds=self._invoke(operation, 0))]

        outcomes: queue.Queue[tuple[int, float, BaseException | None]] = queue.Queue()

        def target(index: int) -> None:
            try:
                outcomes.put((index, operation(index), None))
            except BaseException as exc:  # reported to the joining thread
                outcomes.put((index, 0.0, exc))

        logger.debug("Let's create %d threads", self.n_threads)
        for index in range(self.n_threads):
            thread = threading.Thread(
                target=target,
                args=(index,),
                name=f"{self.name}-{index}",
                daemon=True,
            )
            thread.start()

        logger.debug("Threads created, waiting for completion")
        seconds_by_index: dict[int, float] = {}
        while len(seconds_by_index) < self.n_threads:
            index, seconds, error = outcomes.get()
            if error is not None:
                raise self._as_benchmark_error(index, error)
            logger.debug("Thread #%d has finished with delta = %f", index, seconds)
            seconds_by_index[index] = seconds

        return [WorkerResult(index=i, seconds=seconds_by_index[i]) for i in range(self.n_threads)]

    def _invoke(self, operation: WorkerOperation, index: int) -> float:
        try:
            seconds = operation(index)
        except BenchmarkError:
            raise
        except Exception as exc:
            raise BenchmarkError(f"Worker #{index} failed: {exc}") from exc
        logger.debug("Worker #%d has finished with delta = %f", index, seconds)
        return seconds

    @staticmethod
    def _as_benchmark_error(index: int, error: BaseException) -> BenchmarkError:
        if isinstance(error, BenchmarkError):
            return error
        wrapped = BenchmarkError(f"Worker #{index} failed: {error}")
        wrapped.__cause__ = error
        return wrapped
