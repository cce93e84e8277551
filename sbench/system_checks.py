"""System environment checks for benchmarking."""

from __future__ import annotations

import logging
from pathlib import Path


logger = logging.getLogger(__name__)

CPU_SYSFS_DIR = Path("/sys/devices/system/cpu")


def check_cpu_governor(cpu_dir: Path = CPU_SYSFS_DIR) -> list[str]:
    """Check CPU frequency scaling governor settings.

    Returns a list of warning messages if issues are detected.
    """
    warnings_list: list[str] = []

    if not cpu_dir.exists():
        return warnings_list

    governors = set()
    for cpu_path in sorted(cpu_dir.glob("cpu[0-9]*")):
        governor_file = cpu_path / "cpufreq" / "scaling_governor"
        if not governor_file.exists():
            continue
        try:
            governors.add(governor_file.read_text().strip())
        except OSError:
            continue

    # No cpufreq support detected
    if not governors:
        return warnings_list

    if "performance" not in governors:
        gov_list = ", ".join(f"'{g}'" for g in sorted(governors))
        warnings_list.append(
            f"CPU frequency scaling governor is {gov_list} (not 'performance'). "
            f"CPU timings may vary between runs due to dynamic frequency scaling."
        )

    return warnings_list


def log_system_warnings(warnings_list: list[str]) -> None:
    """Report environment warnings as verbose diagnostics."""
    for warning in warnings_list:
        logger.info(warning)
