"""Report lines and exit codes for benchmark results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import NamedTuple

from .benchmarks import BenchmarkType
from .models import (
    EXIT_CODE_CRITICAL,
    EXIT_CODE_OK,
    BenchmarkResult,
    PingThresholds,
    Thresholds,
    Verdict,
)
from .thresholds import classify_result


class Presentation(NamedTuple):
    label: str
    unit: str
    perfdata_key: str


PRESENTATIONS: dict[BenchmarkType, Presentation] = {
    BenchmarkType.CPU: Presentation("CPU", "calcs/s", "cpu"),
    BenchmarkType.MEM: Presentation("Mem", "s", "mem"),
    BenchmarkType.DISK_W: Presentation("Disk write", "s", "disk_w"),
    BenchmarkType.DISK_R_SEQ: Presentation("Disk sequential read", "s", "disk_r_seq"),
    BenchmarkType.DISK_R_RAN: Presentation("Disk random read", "s", "disk_r_ran"),
    BenchmarkType.HTTP_GET: Presentation("HTTP GET", "s", "http_get"),
    BenchmarkType.PING: Presentation("Ping", "ms", "ping"),
}


@dataclass(frozen=True)
class Report:
    """What gets printed and how the process exits."""

    text: str
    exit_code: int
    result: BenchmarkResult
    verdict: Verdict | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dict for JSON serialization."""
        return {
            "text": self.text,
            "verdict": self.verdict.name if self.verdict is not None else None,
            "exit_code": self.exit_code,
            "result": self.result.to_dict(),
        }


def _ping_value(result: BenchmarkResult) -> str:
    assert result.ping is not None
    return f"{result.ping.latency_ms:f} ms, {result.ping.loss_percent:f} % loss"


def format_simple(result: BenchmarkResult) -> tuple[str, int]:
    """Unclassified report: the raw value and an exit code."""
    if result.http is not None:
        if result.http.content_differs:
            return f"KO: {result.http.seconds:f} s", EXIT_CODE_CRITICAL
        return f"OK: {result.http.seconds:f} s", EXIT_CODE_OK
    if result.ping is not None:
        return _ping_value(result), EXIT_CODE_OK
    return f"{result.mean_seconds:f} s", EXIT_CODE_OK


def format_classified(result: BenchmarkResult, verdict: Verdict) -> str:
    """Monitoring-plugin line: ``<Label> <Verdict> = <value>[ <unit>]| <key>=<value>``."""
    presentation = PRESENTATIONS[result.benchmark_type]
    label = presentation.label
    if result.ping is not None:
        value = _ping_value(result)
        perfdata = f"latency={result.ping.latency_ms:f} loss={result.ping.loss_percent:f}"
    else:
        if result.http is not None and result.http.content_differs:
            label = f"{label} (content differs)"
        value = f"{result.metric:f} {presentation.unit}"
        perfdata = f"{presentation.perfdata_key}={result.metric:f}"
    return f"{label} {verdict.name} = {value}| {perfdata}"


def build_report(result: BenchmarkResult, thresholds: Thresholds | PingThresholds | None) -> Report:
    """Classify when thresholds are configured, otherwise report the raw value."""
    if thresholds is None:
        text, exit_code = format_simple(result)
        return Report(text=text, exit_code=exit_code, result=result)
    verdict = classify_result(result, thresholds)
    return Report(
        text=format_classified(result, verdict),
        exit_code=int(verdict),
        result=result,
        verdict=verdict,
    )


def render_json(report: Report) -> str:
    """JSON document for ``--json``."""
    return json.dumps(report.to_dict(), indent=2)
