"""Shared pytest fixtures for sbench.

Provides:
- a factory writing pre-sized files for the disk read benchmarks
- a throwaway HTTP server serving files from a temporary folder
- a folder of HTTP GET reference files
"""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable, Iterator
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest


class QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[int, str], Path]:
    """Write a file of ``size`` bytes and return its path."""

    def _make(size: int, name: str = "sbench.testfile") -> Path:
        path = tmp_path / name
        path.write_bytes(bytes(i % 251 for i in range(size)))
        return path

    return _make


@pytest.fixture
def served_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "www"
    folder.mkdir()
    return folder


@pytest.fixture
def refs_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "http_refs"
    folder.mkdir()
    return folder


@pytest.fixture
def http_server(served_dir: Path) -> Iterator[str]:
    """Serve ``served_dir`` on localhost and yield its base URL."""
    handler = functools.partial(QuietHandler, directory=str(served_dir))
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
