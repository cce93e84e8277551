"""Tests for sbench/output.py report lines."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sbench.benchmarks import BenchmarkType
from sbench.models import (
    BenchmarkParameters,
    BenchmarkResult,
    HttpGetResponse,
    PingResponse,
    PingThresholds,
    Thresholds,
    Verdict,
    WorkerResult,
)
from sbench.output import PRESENTATIONS, build_report, format_classified, format_simple, render_json


def _pooled(benchmark_type: BenchmarkType, metric: float, mean_seconds: float) -> BenchmarkResult:
    kwargs: dict[str, object] = {}
    if benchmark_type != BenchmarkType.CPU:
        kwargs["size_in_bytes"] = 4096
    if benchmark_type == BenchmarkType.DISK_W:
        kwargs["folder"] = Path("/tmp/_sbench.d")
    if benchmark_type.is_disk_read:
        kwargs["target_file"] = Path("/tmp/_sbench.testfile")
    params = BenchmarkParameters(benchmark_type, times=10, **kwargs)
    return BenchmarkResult(
        benchmark_type=benchmark_type,
        metric=metric,
        mean_seconds=mean_seconds,
        parameters=params,
        workers=(WorkerResult(index=0, seconds=mean_seconds),),
    )


def _http(seconds: float, differs: bool) -> BenchmarkResult:
    params = BenchmarkParameters(
        BenchmarkType.HTTP_GET, times=1, url="http://www.test.com/file", http_ref_basename="ref"
    )
    return BenchmarkResult(
        benchmark_type=BenchmarkType.HTTP_GET,
        metric=seconds,
        mean_seconds=seconds,
        parameters=params,
        http=HttpGetResponse(seconds=seconds, content_differs=differs, status_code=200, size_bytes=10),
    )


def _ping(latency: float, loss: float) -> BenchmarkResult:
    params = BenchmarkParameters(BenchmarkType.PING, times=4, size_in_bytes=56, destination="www.test.com")
    return BenchmarkResult(
        benchmark_type=BenchmarkType.PING,
        metric=latency,
        mean_seconds=latency / 1000,
        parameters=params,
        ping=PingResponse(latency_ms=latency, loss_percent=loss, transmitted=4, received=4),
    )


# ---------------------------------------------------------------------------
# Simplified output
# ---------------------------------------------------------------------------


def test_every_benchmark_type_has_a_presentation() -> None:
    assert set(PRESENTATIONS) == set(BenchmarkType)


def test_simple_output_prints_mean_seconds() -> None:
    assert format_simple(_pooled(BenchmarkType.MEM, 0.25, 0.25)) == ("0.250000 s", 0)


def test_simple_cpu_output_prints_seconds_not_throughput() -> None:
    assert format_simple(_pooled(BenchmarkType.CPU, 4000.0, 0.5)) == ("0.500000 s", 0)


def test_simple_http_output() -> None:
    assert format_simple(_http(0.125, differs=False)) == ("OK: 0.125000 s", 0)
    assert format_simple(_http(0.125, differs=True)) == ("KO: 0.125000 s", 2)


def test_simple_ping_output() -> None:
    assert format_simple(_ping(12.5, 25.0)) == ("12.500000 ms, 25.000000 % loss", 0)


# ---------------------------------------------------------------------------
# Classified output
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("benchmark_type", "expected"),
    [
        (BenchmarkType.MEM, "Mem WARNING = 1.500000 s| mem=1.500000"),
        (BenchmarkType.DISK_W, "Disk write WARNING = 1.500000 s| disk_w=1.500000"),
        (BenchmarkType.DISK_R_SEQ, "Disk sequential read WARNING = 1.500000 s| disk_r_seq=1.500000"),
        (BenchmarkType.DISK_R_RAN, "Disk random read WARNING = 1.500000 s| disk_r_ran=1.500000"),
    ],
)
def test_classified_output_labels(benchmark_type: BenchmarkType, expected: str) -> None:
    assert format_classified(_pooled(benchmark_type, 1.5, 1.5), Verdict.WARNING) == expected


def test_classified_cpu_output_uses_throughput() -> None:
    line = format_classified(_pooled(BenchmarkType.CPU, 2000.0, 0.5), Verdict.OK)
    assert line == "CPU OK = 2000.000000 calcs/s| cpu=2000.000000"


def test_classified_http_output_flags_differing_content() -> None:
    line = format_classified(_http(0.1, differs=True), Verdict.CRITICAL)
    assert line == "HTTP GET (content differs) CRITICAL = 0.100000 s| http_get=0.100000"


def test_classified_ping_output() -> None:
    line = format_classified(_ping(12.5, 0.0), Verdict.OK)
    assert line == "Ping OK = 12.500000 ms, 0.000000 % loss| latency=12.500000 loss=0.000000"


# ---------------------------------------------------------------------------
# build_report / render_json
# ---------------------------------------------------------------------------


def test_build_report_without_thresholds_is_simple() -> None:
    report = build_report(_pooled(BenchmarkType.MEM, 0.25, 0.25), None)
    assert report.text == "0.250000 s"
    assert report.exit_code == 0
    assert report.verdict is None


@pytest.mark.parametrize(
    ("metric", "exit_code"),
    [(0.1, 0), (0.7, 1), (3.0, 2)],
)
def test_build_report_exit_code_matches_verdict(metric: float, exit_code: int) -> None:
    report = build_report(_pooled(BenchmarkType.DISK_W, metric, metric), Thresholds(warn=0.5, crit=2.0))
    assert report.exit_code == exit_code
    assert int(report.verdict) == exit_code


def test_build_report_ping_unknown_exit_code() -> None:
    result = _ping(-1.0, 50.0)
    report = build_report(result, PingThresholds(100.0, 20.0, 500.0, 60.0))
    assert report.verdict is Verdict.UNKNOWN
    assert report.exit_code == 3


def test_render_json_contains_result() -> None:
    report = build_report(_http(0.1, differs=False), Thresholds(warn=0.5, crit=2.0))

    document = json.loads(render_json(report))

    assert document["verdict"] == "OK"
    assert document["exit_code"] == 0
    assert document["result"]["name"] == "http_get"
    assert document["result"]["http"]["content_differs"] is False
    assert document["result"]["parameters"]["url"] == "http://www.test.com/file"


def test_pooled_result_serialises_only_its_fields() -> None:
    data = _pooled(BenchmarkType.MEM, 0.25, 0.25).to_dict()
    assert set(data) == {"name", "metric", "mean_seconds", "parameters", "workers"}
    assert data["workers"] == [{"index": 0, "seconds": 0.25}]
