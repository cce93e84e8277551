"""Tests for the HTTP GET benchmark against a local HTTP server."""

from __future__ import annotations

import socket
import tempfile
import threading
import time
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
import requests

from sbench.benchmarks import BenchmarkType, HttpGetBenchmark
from sbench.benchmarks.network import contents_differ, reference_path
from sbench.errors import BenchmarkError
from sbench.models import BenchmarkParameters


PAYLOAD = b"sbench reference content\n" * 200


def _params(url: str, refs_folder: Path, ref_name: str = "ref") -> BenchmarkParameters:
    return BenchmarkParameters(
        BenchmarkType.HTTP_GET,
        times=1,
        url=url,
        http_ref_basename=ref_name,
        http_refs_folder=refs_folder,
    )


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# ---------------------------------------------------------------------------
# contents_differ
# ---------------------------------------------------------------------------


def test_contents_differ_identical_files(tmp_path: Path) -> None:
    (tmp_path / "a").write_bytes(PAYLOAD)
    (tmp_path / "b").write_bytes(PAYLOAD)
    assert contents_differ(tmp_path / "a", tmp_path / "b") is False


def test_contents_differ_one_byte(tmp_path: Path) -> None:
    changed = bytearray(PAYLOAD)
    changed[100] ^= 0xFF
    (tmp_path / "a").write_bytes(PAYLOAD)
    (tmp_path / "b").write_bytes(bytes(changed))
    assert contents_differ(tmp_path / "a", tmp_path / "b") is True


def test_contents_differ_prefix(tmp_path: Path) -> None:
    (tmp_path / "a").write_bytes(PAYLOAD)
    (tmp_path / "b").write_bytes(PAYLOAD[:-1])
    assert contents_differ(tmp_path / "a", tmp_path / "b") is True


def test_reference_path_joins_folder_and_name(refs_folder: Path) -> None:
    assert reference_path(_params("http://x/", refs_folder, "my_ref")) == refs_folder / "my_ref"


# ---------------------------------------------------------------------------
# HttpGetBenchmark
# ---------------------------------------------------------------------------


def test_http_get_matching_content(http_server: str, served_dir: Path, refs_folder: Path) -> None:
    (served_dir / "file").write_bytes(PAYLOAD)
    (refs_folder / "ref").write_bytes(PAYLOAD)

    result = HttpGetBenchmark().execute(_params(f"{http_server}/file", refs_folder))

    assert result.http is not None
    assert result.http.content_differs is False
    assert result.http.status_code == 200
    assert result.http.size_bytes == len(PAYLOAD)
    assert result.metric == result.http.seconds >= 0


def test_http_get_differing_content(http_server: str, served_dir: Path, refs_folder: Path) -> None:
    (served_dir / "file").write_bytes(PAYLOAD)
    (refs_folder / "ref").write_bytes(PAYLOAD.upper())

    result = HttpGetBenchmark().execute(_params(f"{http_server}/file", refs_folder))

    assert result.http is not None
    assert result.http.content_differs is True


def test_http_get_missing_resource_differs(http_server: str, refs_folder: Path) -> None:
    (refs_folder / "ref").write_bytes(PAYLOAD)

    result = HttpGetBenchmark().execute(_params(f"{http_server}/missing", refs_folder))

    assert result.http is not None
    assert result.http.status_code == 404
    assert result.http.content_differs is True


def test_http_get_missing_reference_is_fatal(http_server: str, refs_folder: Path) -> None:
    with pytest.raises(BenchmarkError, match="Can't open the reference file"):
        HttpGetBenchmark().execute(_params(f"{http_server}/file", refs_folder, "absent"))


def test_http_get_connection_failure_is_fatal(refs_folder: Path) -> None:
    (refs_folder / "ref").write_bytes(PAYLOAD)
    url = f"http://127.0.0.1:{_unused_port()}/file"

    with pytest.raises(BenchmarkError, match="HTTP GET of .* failed"):
        HttpGetBenchmark(timeout=5).execute(_params(url, refs_folder))


def test_http_get_removes_temporary_file(
    http_server: str,
    served_dir: Path,
    refs_folder: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    (served_dir / "file").write_bytes(PAYLOAD)
    (refs_folder / "ref").write_bytes(PAYLOAD)

    HttpGetBenchmark().execute(_params(f"{http_server}/file", refs_folder))

    assert list(scratch.iterdir()) == []


def test_http_get_uses_given_session(http_server: str, served_dir: Path, refs_folder: Path) -> None:
    (served_dir / "file").write_bytes(PAYLOAD)
    (refs_folder / "ref").write_bytes(PAYLOAD)

    with requests.Session() as session:
        benchmark = HttpGetBenchmark(session=session)
        first = benchmark.execute(_params(f"{http_server}/file", refs_folder))
        second = benchmark.execute(_params(f"{http_server}/file", refs_folder))

    assert first.http is not None and second.http is not None
    assert not first.http.content_differs and not second.http.content_differs


# ---------------------------------------------------------------------------
# Whole-transfer timeout
# ---------------------------------------------------------------------------


class TrickleHandler(BaseHTTPRequestHandler):
    """Announce six bytes and send one every 0.6 s."""

    def do_GET(self) -> None:
        self.send_response(200)
        self.send_header("Content-Length", "6")
        self.end_headers()
        try:
            for _ in range(6):
                self.wfile.write(b"x")
                self.wfile.flush()
                time.sleep(0.6)
        except OSError:
            pass

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture
def trickle_server() -> Iterator[str]:
    server = ThreadingHTTPServer(("127.0.0.1", 0), TrickleHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_http_get_slow_body_is_cut_at_the_timeout(trickle_server: str, refs_folder: Path) -> None:
    (refs_folder / "ref").write_bytes(b"xxxxxx")
    benchmark = HttpGetBenchmark(timeout=1.0)

    start = time.monotonic()
    with pytest.raises(BenchmarkError, match=r"timed out after 1.0 s"):
        benchmark.execute(_params(f"{trickle_server}/slow", refs_folder))
    elapsed = time.monotonic() - start

    assert elapsed < 2.5


def test_http_get_download_stops_once_the_deadline_has_passed(
    http_server: str, served_dir: Path, tmp_path: Path
) -> None:
    (served_dir / "file").write_bytes(PAYLOAD)

    with pytest.raises(BenchmarkError, match="timed out"):
        HttpGetBenchmark()._download(f"{http_server}/file", tmp_path / "out", deadline=time.monotonic() - 1)
