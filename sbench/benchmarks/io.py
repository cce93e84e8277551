"""Disk I/O benchmarks: durable writes and sequential/random reads."""

from __future__ import annotations

import logging
import os
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import BenchmarkError
from ..models import BenchmarkParameters
from ..utils import format_bytes
from .base import PooledBenchmark
from .memory import allocate_filled
from .types import BenchmarkType


logger = logging.getLogger(__name__)

DISK_W_FILE_PREFIX = "disk_w.out"
DISK_W_FOLDER_MODE = 0o700
DISK_W_FILE_MODE = 0o600


def shuffled_blocks(count: int, rng: random.Random | None = None) -> list[int]:
    """Return a random permutation of ``range(count)`` (Fisher-Yates)."""
    blocks = list(range(count))
    (rng or random).shuffle(blocks)
    return blocks


def partition_blocks(blocks: Sequence[int], times: int, n_threads: int) -> list[tuple[int, ...]]:
    """Split ``blocks`` into ``n_threads`` contiguous slices of ``times`` blocks each."""
    if len(blocks) != times * n_threads:
        raise ValueError(f"Expected {times * n_threads} blocks, got {len(blocks)}")
    return [tuple(blocks[i * times : (i + 1) * times]) for i in range(n_threads)]


def ensure_folder(folder: Path) -> None:
    """Create ``folder`` if missing; an existing non-directory is fatal."""
    if folder.exists():
        if not folder.is_dir():
            raise BenchmarkError(f"{folder} must be a folder")
        return
    try:
        folder.mkdir(mode=DISK_W_FOLDER_MODE)
    except OSError as exc:
        raise BenchmarkError(f"Can't create the folder {folder}: {exc.strerror or exc}") from exc


def worker_file_path(folder: Path, index: int) -> Path:
    return folder / f"{DISK_W_FILE_PREFIX}.{index}"


class DiskWriteBenchmark(PooledBenchmark[None]):
    benchmark_type = BenchmarkType.DISK_W
    description = "Write blocks to a private file per worker, fsync after every write"
    params_usage = "times,sizeInBytes,folder"

    def prepare(self, params: BenchmarkParameters) -> None:
        assert params.folder is not None
        ensure_folder(params.folder)

    def run_worker(self, params: BenchmarkParameters, index: int, context: None) -> float:
        assert params.folder is not None
        size = params.size_in_bytes
        buffer = allocate_filled(size)
        path = worker_file_path(params.folder, index)
        logger.debug(
            "Thread #%d will write %s %d times on %s", index, format_bytes(size), params.times, path
        )

        # Any previous file left by an interrupted run is overwritten.
        try:
            fd = os.open(path, os.O_CREAT | os.O_TRUNC | os.O_RDWR, DISK_W_FILE_MODE)
        except OSError as exc:
            raise BenchmarkError(f"Can't open the target file {path} for writing: {exc.strerror}") from exc

        try:
            start = time.perf_counter()
            for i in range(params.times):
                try:
                    written = os.write(fd, buffer)
                except OSError as exc:
                    raise BenchmarkError(f"Can't write {size} bytes to {path}: {exc.strerror}") from exc
                if written != size:
                    raise BenchmarkError(f"Can't write {size} bytes to {path}, wrote just {written}")
                try:
                    os.fsync(fd)
                except OSError as exc:
                    raise BenchmarkError(f"Can't flush after writing {i}-th block on {path}: {exc.strerror}") from exc
            elapsed = time.perf_counter() - start
        finally:
            os.close(fd)

        try:
            path.unlink()
        except OSError as exc:
            raise BenchmarkError(f"Can't delete the target file {path} after the test: {exc.strerror}") from exc
        return elapsed


@dataclass(frozen=True)
class ReadPlan:
    """Blocks each worker reads, fixed before any worker starts."""

    partitions: tuple[tuple[int, ...], ...]


class DiskReadBenchmark(PooledBenchmark[ReadPlan]):
    """Concurrent reads of one pre-existing file.

    One shuffled list of ``times * n_threads`` block numbers is split into
    contiguous partitions so workers touch disjoint, scattered regions of the
    same file. Random mode seeks to every block of the partition; sequential
    mode reads the worker's private contiguous byte range.
    """

    params_usage = "times,sizeInBytes,file"

    def __init__(self, benchmark_type: BenchmarkType, rng: random.Random | None = None):
        if not benchmark_type.is_disk_read:
            raise ValueError(f"{benchmark_type.value} is not a disk read benchmark")
        self.benchmark_type = benchmark_type
        self.rng = rng
        mode = "random" if self.random_access else "sequential"
        self.description = f"Read blocks from an existing file, {mode} access"

    @property
    def random_access(self) -> bool:
        return self.benchmark_type == BenchmarkType.DISK_R_RAN

    def prepare(self, params: BenchmarkParameters) -> ReadPlan:
        assert params.target_file is not None
        target = params.target_file
        try:
            actual = os.stat(target).st_size
        except FileNotFoundError:
            raise BenchmarkError(f"Can't find the target file {target}") from None
        except OSError as exc:
            raise BenchmarkError(f"Can't stat the target file {target}: {exc.strerror}") from exc
        required = params.size_in_bytes * params.total_blocks
        if actual < required:
            raise BenchmarkError(
                f"The size of the file {target} is {actual} bytes and must be greater or equal to "
                f"{params.times}*{params.n_threads}*{params.size_in_bytes} = {required} bytes"
            )
        blocks = shuffled_blocks(params.total_blocks, self.rng)
        return ReadPlan(partitions=tuple(partition_blocks(blocks, params.times, params.n_threads)))

    def run_worker(self, params: BenchmarkParameters, index: int, context: ReadPlan | None) -> float:
        assert params.target_file is not None and context is not None
        target = params.target_file
        size = params.size_in_bytes
        offsets = [block * size for block in context.partitions[index]]
        if offsets:
            logger.debug("Thread #%d started, with first byte of first block: %d", index, offsets[0])

        try:
            fd = os.open(target, os.O_RDONLY)
        except OSError as exc:
            raise BenchmarkError(f"Can't open the target file {target} for reading: {exc.strerror}") from exc

        try:
            if not self.random_access:
                first_byte = index * params.times * size
                try:
                    os.lseek(fd, first_byte, os.SEEK_SET)
                except OSError as exc:
                    raise BenchmarkError(f"Can't lseek to byte {first_byte} of {target}: {exc.strerror}") from exc
            start = time.perf_counter()
            for i in range(params.times):
                if self.random_access:
                    try:
                        os.lseek(fd, offsets[i], os.SEEK_SET)
                    except OSError as exc:
                        raise BenchmarkError(
                            f"Can't lseek to byte {offsets[i]} of {target} on {i}-th iteration: {exc.strerror}"
                        ) from exc
                try:
                    data = os.read(fd, size)
                except OSError as exc:
                    raise BenchmarkError(f"Can't read from {target} on {i}-th iteration: {exc.strerror}") from exc
                if len(data) != size:
                    raise BenchmarkError(f"Read just {len(data)} bytes from {target} on {i}-th iteration")
            elapsed = time.perf_counter() - start
        finally:
            os.close(fd)
        return elapsed
