"""ICMP ping latency and loss benchmark."""

from __future__ import annotations

import logging
import os
from typing import Protocol

import icmplib

from ..errors import BenchmarkError
from ..models import BenchmarkParameters, BenchmarkResult, PingResponse
from ..parsers import parse_ping_output
from ..utils import check_requirements, run_command
from .base import DEFAULT_PING_PROVIDER, BenchmarkBase
from .types import BenchmarkType


logger = logging.getLogger(__name__)

PING_INTERVAL_SECONDS = 1.0
ICMPLIB_REPLY_TIMEOUT_SECONDS = 2.0
UNMEASURED_LATENCY = -1.0


def build_ping_response(times: int, received: int, average_ms: float | None) -> PingResponse:
    """Loss over the requested count, latency only when a reply was averaged."""
    received = min(received, times)
    latency = average_ms if received > 0 and average_ms is not None else UNMEASURED_LATENCY
    return PingResponse(
        latency_ms=latency,
        loss_percent=100.0 * (times - received) / times,
        transmitted=times,
        received=received,
    )


class PingProvider(Protocol):
    """Sends echo requests and reports latency and loss."""

    name: str

    def ping(self, destination: str, times: int, size_in_bytes: int) -> PingResponse: ...


class CommandPingProvider:
    """Runs the system ``ping`` executable and parses its summary."""

    name = "command"
    _required_commands = ("ping",)

    def ping(self, destination: str, times: int, size_in_bytes: int) -> PingResponse:
        ok, reason = check_requirements(self._required_commands)
        if not ok:
            raise BenchmarkError(reason)

        command = ["ping", "-s", str(size_in_bytes), "-c", str(times), destination]
        logger.debug("We will use the command [%s]", " ".join(command))
        stdout, duration, returncode = run_command(command)
        logger.debug("ping exited with %d after %.2f s:\n%s", returncode, duration, stdout)

        # ping exits with 1 when replies are missing; the summary is still printed.
        try:
            metrics = parse_ping_output(stdout)
        except ValueError as exc:
            detail = stdout.strip().splitlines()[-1] if stdout.strip() else f"exit code {returncode}"
            raise BenchmarkError(f"Can't ping {destination}: {detail}") from exc

        received = int(metrics["received"])
        return build_ping_response(times, received, metrics.get("latency_avg_ms"))


class IcmplibPingProvider:
    """Uses the icmplib library; raw sockets need root or CAP_NET_RAW."""

    name = "icmplib"

    def __init__(self, privileged: bool | None = None):
        self.privileged = os.geteuid() == 0 if privileged is None else privileged

    def ping(self, destination: str, times: int, size_in_bytes: int) -> PingResponse:
        try:
            host = icmplib.ping(
                destination,
                count=times,
                interval=PING_INTERVAL_SECONDS,
                timeout=ICMPLIB_REPLY_TIMEOUT_SECONDS,
                payload_size=size_in_bytes,
                privileged=self.privileged,
            )
        except icmplib.ICMPLibError as exc:
            raise BenchmarkError(
                f"Can't ping {destination}: {exc}. If the operation is not permitted you could use "
                f'something like "sudo setcap cap_net_raw=ep" on your interpreter'
            ) from exc

        for index, rtt in enumerate(host.rtts, start=1):
            logger.debug("ping #%d: hostname = %s, latency = %f", index, host.address, rtt)
        return build_ping_response(times, host.packets_received, host.avg_rtt)


PING_PROVIDERS: dict[str, type[CommandPingProvider] | type[IcmplibPingProvider]] = {
    CommandPingProvider.name: CommandPingProvider,
    IcmplibPingProvider.name: IcmplibPingProvider,
}


def get_ping_provider(name: str = DEFAULT_PING_PROVIDER) -> PingProvider:
    try:
        return PING_PROVIDERS[name]()
    except KeyError:
        choices = ", ".join(sorted(PING_PROVIDERS))
        raise ValueError(f"Unknown ping provider {name!r} (choose from {choices})") from None


class PingBenchmark(BenchmarkBase):
    benchmark_type = BenchmarkType.PING
    description = "Send ICMP echo requests at 1 s intervals, report average latency and loss"
    params_usage = "times,sizeInBytes,destination"

    def __init__(self, provider: PingProvider | None = None):
        self.provider = provider or get_ping_provider()

    def execute(self, params: BenchmarkParameters) -> BenchmarkResult:
        logger.debug(
            "Sending %d ICMP echo request packets %d bytes-long to %s using the %s provider",
            params.times,
            params.size_in_bytes,
            params.destination,
            self.provider.name,
        )
        response = self.provider.ping(params.destination, params.times, params.size_in_bytes)
        logger.debug("average: %f ms, loss: %f %%", response.latency_ms, response.loss_percent)
        return BenchmarkResult(
            benchmark_type=self.benchmark_type,
            metric=response.latency_ms,
            mean_seconds=response.latency_ms / 1000 if response.latency_measured else UNMEASURED_LATENCY,
            parameters=params,
            ping=response,
        )
