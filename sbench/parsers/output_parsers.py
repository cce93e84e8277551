"""Output parsers for external tools."""
from __future__ import annotations

import re
from typing import Dict

from ..utils import parse_float


def parse_ping_output(output: str) -> Dict[str, float]:
    """Parse the summary printed by iputils/BSD ``ping``.

    Requires the ``N packets transmitted, M received`` line. The round-trip
    statistics are only present when at least one reply arrived, so the
    latency keys may be missing.
    """
    summary = re.search(r"(\d+) packets transmitted, (\d+) (?:packets )?received", output)
    if not summary:
        raise ValueError("Unable to parse ping summary")

    result: Dict[str, float] = {
        "transmitted": float(summary.group(1)),
        "received": float(summary.group(2)),
    }

    loss = re.search(r"([\d.,]+)% packet loss", output)
    if loss:
        result["loss_percent"] = parse_float(loss.group(1))

    rtt = re.search(r"= ([\d.]+)/([\d.]+)/([\d.]+)/([\d.]+) ms", output)
    if rtt:
        result["latency_min_ms"] = float(rtt.group(1))
        result["latency_avg_ms"] = float(rtt.group(2))
        result["latency_max_ms"] = float(rtt.group(3))
        result["latency_mdev_ms"] = float(rtt.group(4))

    return result
