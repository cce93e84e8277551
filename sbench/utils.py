"""Utility functions for benchmarking."""

from __future__ import annotations

import os
import shutil
import subprocess
import time
from collections.abc import Sequence


def parse_float(token: str) -> float:
    """Parse float, handling European decimal separator."""
    return float(token.replace(",", "."))


def command_exists(command: str) -> bool:
    """Check if a command exists in PATH."""
    return shutil.which(command) is not None


def check_requirements(commands: Sequence[str]) -> tuple[bool, str]:
    """Check if all required commands are available."""
    for cmd in commands:
        if not command_exists(cmd):
            return False, f"Command {cmd!r} was not found in PATH"
    return True, ""


def run_command(command: list[str], *, env: dict[str, str] | None = None) -> tuple[str, float, int]:
    """Run a command and return its output, duration, and return code."""
    start = time.perf_counter()

    # Force English locale to ensure parseable output
    run_env = os.environ.copy()
    run_env["LC_ALL"] = "C"
    run_env["LANGUAGE"] = "C"

    if env:
        run_env.update(env)

    completed = subprocess.run(
        command,
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        env=run_env,
    )
    duration = time.perf_counter() - start
    return completed.stdout, duration, completed.returncode


def format_bytes(size: int) -> str:
    """Human-readable byte count for log messages."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KiB", "MiB"):
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} GiB"
