"""Exceptions raised by the benchmark harness."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid or missing command-line parameters."""


class BenchmarkError(RuntimeError):
    """Fatal failure while running a benchmark; the whole run is aborted."""
