"""Classify benchmark metrics against warning/critical thresholds."""

from __future__ import annotations

from .models import BenchmarkResult, HttpGetResponse, PingResponse, PingThresholds, Thresholds, Verdict


FULL_LOSS_PERCENT = 100.0


def classify(metric: float, thresholds: Thresholds) -> Verdict:
    """Greater is worse: reaching ``crit`` is CRITICAL, reaching ``warn`` is WARNING.

    CPU throughput goes through the same comparison even though a higher
    throughput is better.
    """
    if metric >= thresholds.crit:
        return Verdict.CRITICAL
    if metric >= thresholds.warn:
        return Verdict.WARNING
    return Verdict.OK


def classify_ping(response: PingResponse, thresholds: PingThresholds) -> Verdict:
    """Worst verdict of latency and loss; UNKNOWN for an inconsistent measurement."""
    full_loss = response.loss_percent >= FULL_LOSS_PERCENT
    if not response.latency_measured and not full_loss:
        return Verdict.UNKNOWN

    loss = classify(response.loss_percent, Thresholds(thresholds.warn_loss_percent, thresholds.crit_loss_percent))
    if full_loss:
        # No reply means no latency; loss alone decides.
        return loss
    latency = classify(response.latency_ms, Thresholds(thresholds.warn_latency_ms, thresholds.crit_latency_ms))
    return max(loss, latency)


def classify_http(response: HttpGetResponse, thresholds: Thresholds) -> Verdict:
    """Content that differs from the reference is CRITICAL whatever the timing."""
    if response.content_differs:
        return Verdict.CRITICAL
    return classify(response.seconds, thresholds)


def classify_result(result: BenchmarkResult, thresholds: Thresholds | PingThresholds) -> Verdict:
    """Dispatch to the classifier matching the result's payload."""
    if result.ping is not None:
        if not isinstance(thresholds, PingThresholds):
            raise TypeError("ping results need PingThresholds")
        return classify_ping(result.ping, thresholds)
    if isinstance(thresholds, PingThresholds):
        raise TypeError(f"{result.name} results need scalar Thresholds")
    if result.http is not None:
        return classify_http(result.http, thresholds)
    return classify(result.metric, thresholds)
