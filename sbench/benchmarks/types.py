"""Benchmark type enumeration."""

from __future__ import annotations

from enum import Enum


class BenchmarkType(str, Enum):
    CPU = "cpu"
    MEM = "mem"
    DISK_W = "disk_w"
    DISK_R_SEQ = "disk_r_seq"
    DISK_R_RAN = "disk_r_ran"
    HTTP_GET = "http_get"
    PING = "ping"

    @property
    def is_pooled(self) -> bool:
        """Whether the benchmark runs through the worker pool."""
        return self not in (BenchmarkType.HTTP_GET, BenchmarkType.PING)

    @property
    def is_disk_read(self) -> bool:
        return self in (BenchmarkType.DISK_R_SEQ, BenchmarkType.DISK_R_RAN)
