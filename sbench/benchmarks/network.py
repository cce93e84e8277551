"""HTTP GET benchmark with content verification."""

from __future__ import annotations

import filecmp
import logging
import os
import queue
import tempfile
import threading
import time
from pathlib import Path

import requests

from ..errors import BenchmarkError
from ..models import BenchmarkParameters, BenchmarkResult, HttpGetResponse
from .base import DEFAULT_HTTP_REFS_FOLDER, DEFAULT_HTTP_TIMEOUT_SECONDS, BenchmarkBase
from .types import BenchmarkType


logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "_sbench.http."
CHUNK_SIZE = 64 * 1024


def contents_differ(downloaded: Path, reference: Path) -> bool:
    """Byte-for-byte comparison; files of different length always differ."""
    return not filecmp.cmp(downloaded, reference, shallow=False)


def reference_path(params: BenchmarkParameters) -> Path:
    folder = params.http_refs_folder or DEFAULT_HTTP_REFS_FOLDER
    return folder / params.http_ref_basename


class HttpGetBenchmark(BenchmarkBase):
    benchmark_type = BenchmarkType.HTTP_GET
    description = "Download a URL by HTTP GET and compare it with a reference file"
    params_usage = "refName,url"

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ):
        self.session = session
        self.timeout = timeout

    def fetch(self, url: str, destination: Path) -> tuple[float, int, int]:
        """GET ``url`` into ``destination``; return elapsed seconds, status and size.

        ``timeout`` caps the whole transfer, not only the connect and
        per-read waits that requests enforces. The download runs on a daemon
        thread so a slowly trickling body cannot hold the caller past the
        deadline; the abandoned download stops at its next chunk.
        """
        deadline = time.monotonic() + self.timeout
        outcome: queue.Queue[tuple[tuple[float, int, int] | None, BaseException | None]] = queue.Queue()

        def target() -> None:
            try:
                outcome.put((self._download(url, destination, deadline), None))
            except BaseException as exc:  # reported to the waiting thread
                outcome.put((None, exc))

        threading.Thread(target=target, name="sbench-http-get", daemon=True).start()
        try:
            result, error = outcome.get(timeout=self.timeout)
        except queue.Empty:
            raise BenchmarkError(f"HTTP GET of {url} timed out after {self.timeout} s") from None
        if error is not None:
            raise error
        assert result is not None
        return result

    def _download(self, url: str, destination: Path, deadline: float) -> tuple[float, int, int]:
        session = self.session or requests.Session()
        size = 0
        try:
            with destination.open("wb") as handle:
                start = time.perf_counter()
                with session.get(url, timeout=self.timeout, allow_redirects=True, stream=True) as response:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if time.monotonic() > deadline:
                            raise BenchmarkError(f"HTTP GET of {url} timed out after {self.timeout} s")
                        handle.write(chunk)
                        size += len(chunk)
                elapsed = time.perf_counter() - start
        except requests.RequestException as exc:
            raise BenchmarkError(f"HTTP GET of {url} failed: {exc}") from exc
        except OSError as exc:
            raise BenchmarkError(f"Can't write the downloaded content to {destination}: {exc}") from exc
        finally:
            if self.session is None:
                session.close()
        logger.debug("GET %s -> HTTP %d, %d bytes in %f s", url, response.status_code, size, elapsed)
        return elapsed, response.status_code, size

    def execute(self, params: BenchmarkParameters) -> BenchmarkResult:
        reference = reference_path(params)
        logger.debug("Using reference file %s", reference)
        if not reference.is_file():
            raise BenchmarkError(f"Can't open the reference file {reference}")

        fd, tmp_name = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX)
        os.close(fd)
        downloaded = Path(tmp_name)
        logger.debug("Using temporary file %s", downloaded)
        try:
            seconds, status_code, size = self.fetch(params.url, downloaded)
            try:
                differs = contents_differ(downloaded, reference)
            except OSError as exc:
                raise BenchmarkError(f"Can't compare {downloaded} with the reference file {reference}: {exc}") from exc
        finally:
            downloaded.unlink(missing_ok=True)

        if differs:
            logger.debug("Content downloaded from %s differs from %s", params.url, reference)
        response = HttpGetResponse(
            seconds=seconds,
            content_differs=differs,
            status_code=status_code,
            size_bytes=size,
        )
        return BenchmarkResult(
            benchmark_type=self.benchmark_type,
            metric=seconds,
            mean_seconds=seconds,
            parameters=params,
            http=response,
        )
