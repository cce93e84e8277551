"""Data models for benchmark parameters, results and verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from .benchmarks.types import BenchmarkType
from .errors import ConfigurationError


EXIT_CODE_OK = 0
EXIT_CODE_WARNING = 1
EXIT_CODE_CRITICAL = 2
EXIT_CODE_UNKNOWN = 3


class Verdict(IntEnum):
    """Monitoring verdict; the value doubles as the process exit code."""

    OK = EXIT_CODE_OK
    WARNING = EXIT_CODE_WARNING
    CRITICAL = EXIT_CODE_CRITICAL
    UNKNOWN = EXIT_CODE_UNKNOWN


@dataclass(frozen=True)
class BenchmarkParameters:
    """Validated, immutable configuration of one benchmark run."""

    benchmark_type: BenchmarkType
    times: int
    size_in_bytes: int = 0
    n_threads: int = 1
    folder: Path | None = None
    target_file: Path | None = None
    url: str = ""
    http_ref_basename: str = ""
    http_refs_folder: Path | None = None
    destination: str = ""

    def __post_init__(self) -> None:
        kind = self.benchmark_type
        if self.times < 1:
            raise ConfigurationError(f"{kind.value}: times must be >= 1, got {self.times}")
        if self.n_threads < 1:
            raise ConfigurationError(f"{kind.value}: the number of threads must be >= 1, got {self.n_threads}")
        if not kind.is_pooled and self.n_threads != 1:
            raise ConfigurationError(f"{kind.value} runs a single transfer and does not accept threads")
        if kind not in (BenchmarkType.CPU, BenchmarkType.HTTP_GET) and self.size_in_bytes < 1:
            raise ConfigurationError(f"{kind.value}: sizeInBytes must be >= 1, got {self.size_in_bytes}")
        if kind == BenchmarkType.DISK_W and self.folder is None:
            raise ConfigurationError("disk_w requires a target folder")
        if kind.is_disk_read and self.target_file is None:
            raise ConfigurationError(f"{kind.value} requires a target file")
        if kind == BenchmarkType.HTTP_GET and (not self.url or not self.http_ref_basename):
            raise ConfigurationError("http_get requires a reference file name and a URL")
        if kind == BenchmarkType.PING and not self.destination:
            raise ConfigurationError("ping requires a destination host")

    @property
    def total_blocks(self) -> int:
        """Number of blocks read by all workers together."""
        return self.times * self.n_threads

    def to_dict(self) -> dict[str, object]:
        """Convert to dict for JSON serialization, skipping unset fields."""
        data: dict[str, object] = {
            "type": self.benchmark_type.value,
            "times": self.times,
            "n_threads": self.n_threads,
        }
        if self.size_in_bytes:
            data["size_in_bytes"] = self.size_in_bytes
        if self.folder is not None:
            data["folder"] = str(self.folder)
        if self.target_file is not None:
            data["target_file"] = str(self.target_file)
        if self.url:
            data["url"] = self.url
            data["http_ref_basename"] = self.http_ref_basename
        if self.destination:
            data["destination"] = self.destination
        return data


@dataclass(frozen=True)
class Thresholds:
    """Warning and critical limits for a scalar metric."""

    warn: float
    crit: float


@dataclass(frozen=True)
class PingThresholds:
    """Warning and critical limits for ping latency and packet loss."""

    warn_latency_ms: float
    warn_loss_percent: float
    crit_latency_ms: float
    crit_loss_percent: float


@dataclass(frozen=True)
class WorkerResult:
    """Elapsed time one worker needed for all of its iterations."""

    index: int
    seconds: float


@dataclass(frozen=True)
class PingResponse:
    """Average latency over successful replies plus the loss percentage."""

    latency_ms: float
    loss_percent: float
    transmitted: int = 0
    received: int = 0

    @property
    def latency_measured(self) -> bool:
        return self.latency_ms >= 0


@dataclass(frozen=True)
class HttpGetResponse:
    """Timing and verification outcome of one HTTP GET."""

    seconds: float
    content_differs: bool
    status_code: int = 0
    size_bytes: int = 0


@dataclass(frozen=True)
class BenchmarkResult:
    """Aggregated outcome of a benchmark run."""

    benchmark_type: BenchmarkType
    metric: float
    mean_seconds: float
    parameters: BenchmarkParameters
    workers: tuple[WorkerResult, ...] = ()
    ping: PingResponse | None = None
    http: HttpGetResponse | None = None

    @property
    def name(self) -> str:
        return self.benchmark_type.value

    def to_dict(self) -> dict[str, object]:
        """Convert to dict only when serializing to JSON."""
        data: dict[str, object] = {
            "name": self.name,
            "metric": self.metric,
            "mean_seconds": self.mean_seconds,
            "parameters": self.parameters.to_dict(),
            "workers": [{"index": w.index, "seconds": w.seconds} for w in self.workers],
        }
        if self.ping is not None:
            data["ping"] = {
                "latency_ms": self.ping.latency_ms,
                "loss_percent": self.ping.loss_percent,
                "transmitted": self.ping.transmitted,
                "received": self.ping.received,
            }
        if self.http is not None:
            data["http"] = {
                "seconds": self.http.seconds,
                "content_differs": self.http.content_differs,
                "status_code": self.http.status_code,
                "size_bytes": self.http.size_bytes,
            }
        return data
