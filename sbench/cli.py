"""Command-line interface for sbench."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .benchmarks import ALL_BENCHMARKS, PING_PROVIDERS, BenchmarkType, get_benchmark
from .benchmarks.base import DEFAULT_HTTP_REFS_FOLDER, DEFAULT_PING_PROVIDER
from .errors import BenchmarkError, ConfigurationError
from .models import (
    EXIT_CODE_CRITICAL,
    EXIT_CODE_OK,
    EXIT_CODE_UNKNOWN,
    BenchmarkParameters,
    PingThresholds,
    Thresholds,
)
from .output import Report, build_report, render_json
from .system_checks import check_cpu_governor, log_system_warnings


logger = logging.getLogger(__name__)

EXIT_CODE_USAGE = EXIT_CODE_UNKNOWN
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

EXAMPLES = f"""\
Examples:
* To allocate&commit 10 MiB of RAM and memset it 10 times:
  sbench -t mem -p 10,10485760
* To do silly calculus (2 pows) 100E6 times on 4 threads, warning over 5E6 calcs/s:
  sbench -t cpu -p 100000000 -n 4 -w 5000000 -c 10000000
* To write 100 MiB in a file in 4k blocks:
  sbench -t disk_w -p 25600,4096,/tmp/_sbench.d
* To read by random access 100 MiB from a file in 4k blocks:
  sbench -t disk_r_ran -p 25600,4096,/tmp/_sbench.testfile
* To download http://www.test.com/file and compare it with the reference
  file 'my_ref_file' located at {DEFAULT_HTTP_REFS_FOLDER}:
  sbench -t http_get -p my_ref_file,http://www.test.com/file -w 0.5 -c 2
* To ping a host 4 times with 56-byte packets, thresholds as latency,loss:
  sbench -t ping -p 4,56,www.test.com -w 100,20 -c 500,60
"""


class SbenchArgumentParser(argparse.ArgumentParser):
    """Raise ConfigurationError instead of exiting on invalid arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ConfigurationError(message)


@dataclass(frozen=True)
class RunConfig:
    """Fully validated command line."""

    params: BenchmarkParameters | None
    thresholds: Thresholds | PingThresholds | None = None
    verbose: bool = False
    json_output: bool = False
    ping_provider: str = DEFAULT_PING_PROVIDER
    list_benchmarks: bool = False


def build_argument_parser() -> argparse.ArgumentParser:
    """Build and configure the argument parser."""
    parser = SbenchArgumentParser(
        prog="sbench",
        description="Simple benchmarks, a first approach to performance measuring.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-t",
        "--type",
        dest="benchmark_type",
        choices=[bt.value for bt in BenchmarkType],
        help="Benchmark to run.",
    )
    parser.add_argument(
        "-p",
        "--params",
        help="Comma-separated benchmark parameters (see --list-benchmarks).",
    )
    parser.add_argument(
        "-n",
        "--threads",
        type=int,
        default=1,
        help="Number of concurrent workers for cpu, mem and disk benchmarks (default: 1).",
    )
    parser.add_argument(
        "-w",
        "--warning",
        help="Warning threshold; 'latency,loss' for ping.",
    )
    parser.add_argument(
        "-c",
        "--critical",
        help="Critical threshold; 'latency,loss' for ping.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostics to stderr.",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the report as JSON.",
    )
    parser.add_argument(
        "--http-refs-folder",
        type=Path,
        default=DEFAULT_HTTP_REFS_FOLDER,
        help=f"Folder holding http_get reference files (default: {DEFAULT_HTTP_REFS_FOLDER}).",
    )
    parser.add_argument(
        "--ping-provider",
        choices=sorted(PING_PROVIDERS),
        default=DEFAULT_PING_PROVIDER,
        help=f"How to send echo requests (default: {DEFAULT_PING_PROVIDER}).",
    )
    parser.add_argument(
        "--list-benchmarks",
        action="store_true",
        help="List available benchmarks and exit.",
    )
    return parser


def _split_params(raw: str, benchmark_type: BenchmarkType, fields: Sequence[str], *, maxsplit: int = -1) -> list[str]:
    parts = [part.strip() for part in raw.split(",", maxsplit)]
    if len(parts) != len(fields) or not all(parts):
        grammar = ",".join(fields)
        raise ConfigurationError(f'Params for {benchmark_type.value} must be in "{grammar}" format')
    return parts


def _parse_count(token: str, name: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ConfigurationError(f'No integer found parsing "{name}": {token!r}') from None


def _parse_number(token: str, name: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise ConfigurationError(f"{name} threshold must be a number, got {token!r}") from None


def parse_params(
    benchmark_type: BenchmarkType,
    raw: str,
    n_threads: int = 1,
    http_refs_folder: Path | None = None,
) -> BenchmarkParameters:
    """Turn the ``-p`` value into validated parameters for ``benchmark_type``."""
    if benchmark_type == BenchmarkType.CPU:
        (times,) = _split_params(raw, benchmark_type, ("times",))
        return BenchmarkParameters(benchmark_type, times=_parse_count(times, "times"), n_threads=n_threads)

    if benchmark_type == BenchmarkType.MEM:
        times, size = _split_params(raw, benchmark_type, ("times", "sizeInBytes"))
        return BenchmarkParameters(
            benchmark_type,
            times=_parse_count(times, "times"),
            size_in_bytes=_parse_count(size, "sizeInBytes"),
            n_threads=n_threads,
        )

    if benchmark_type == BenchmarkType.DISK_W:
        times, size, folder = _split_params(raw, benchmark_type, ("times", "sizeInBytes", "folder"), maxsplit=2)
        return BenchmarkParameters(
            benchmark_type,
            times=_parse_count(times, "times"),
            size_in_bytes=_parse_count(size, "sizeInBytes"),
            n_threads=n_threads,
            folder=Path(folder),
        )

    if benchmark_type.is_disk_read:
        times, size, target = _split_params(raw, benchmark_type, ("times", "sizeInBytes", "file"), maxsplit=2)
        return BenchmarkParameters(
            benchmark_type,
            times=_parse_count(times, "times"),
            size_in_bytes=_parse_count(size, "sizeInBytes"),
            n_threads=n_threads,
            target_file=Path(target),
        )

    if benchmark_type == BenchmarkType.HTTP_GET:
        # The URL itself may contain commas.
        ref_name, url = _split_params(raw, benchmark_type, ("refName", "url"), maxsplit=1)
        return BenchmarkParameters(
            benchmark_type,
            times=1,
            n_threads=n_threads,
            url=url,
            http_ref_basename=ref_name,
            http_refs_folder=http_refs_folder,
        )

    times, size, destination = _split_params(raw, benchmark_type, ("times", "sizeInBytes", "destination"))
    return BenchmarkParameters(
        benchmark_type,
        times=_parse_count(times, "times"),
        size_in_bytes=_parse_count(size, "sizeInBytes"),
        n_threads=n_threads,
        destination=destination,
    )


def parse_thresholds(
    benchmark_type: BenchmarkType,
    warning: str | None,
    critical: str | None,
) -> Thresholds | PingThresholds | None:
    """Both thresholds or none; ping takes ``latency,loss`` pairs."""
    if warning is None and critical is None:
        return None
    if warning is None or critical is None:
        raise ConfigurationError("Both warning (-w) and critical (-c) thresholds must be set")

    if benchmark_type == BenchmarkType.PING:
        pairs = []
        for name, raw in (("Warning", warning), ("Critical", critical)):
            parts = [part.strip() for part in raw.split(",")]
            if len(parts) != 2:
                raise ConfigurationError(f'{name} threshold for ping must be in "latency,loss" format')
            pairs.append((_parse_number(parts[0], f"{name} latency"), _parse_number(parts[1], f"{name} loss")))
        (warn_latency, warn_loss), (crit_latency, crit_loss) = pairs
        return PingThresholds(
            warn_latency_ms=warn_latency,
            warn_loss_percent=warn_loss,
            crit_latency_ms=crit_latency,
            crit_loss_percent=crit_loss,
        )

    return Thresholds(warn=_parse_number(warning, "Warning"), crit=_parse_number(critical, "Critical"))


def build_run_config(argv: Sequence[str] | None = None, parser: argparse.ArgumentParser | None = None) -> RunConfig:
    """Parse ``argv`` into a RunConfig; raises ConfigurationError on bad input."""
    parser = parser or build_argument_parser()
    args = parser.parse_args(argv)

    if args.list_benchmarks:
        return RunConfig(params=None, verbose=args.verbose, list_benchmarks=True)

    if args.benchmark_type is None:
        raise ConfigurationError("Missing benchmark type (-t)")
    if args.params is None:
        raise ConfigurationError("Missing benchmark parameters (-p)")

    benchmark_type = BenchmarkType(args.benchmark_type)
    params = parse_params(benchmark_type, args.params, args.threads, args.http_refs_folder)
    return RunConfig(
        params=params,
        thresholds=parse_thresholds(benchmark_type, args.warning, args.critical),
        verbose=args.verbose,
        json_output=args.json_output,
        ping_provider=args.ping_provider,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def list_benchmarks() -> int:
    """List available benchmarks and exit."""
    print("Available benchmarks:")
    for benchmark in ALL_BENCHMARKS:
        usage = f"-p {benchmark.params_usage}"
        print(f"  {benchmark.name:<11} {usage:<38} {benchmark.description}")
    return EXIT_CODE_OK


def run_benchmark(config: RunConfig) -> Report:
    """Execute the configured benchmark and build its report."""
    params = config.params
    if params is None:
        raise ConfigurationError("No benchmark configured")

    logger.debug("Running %s", params.to_dict())
    if params.benchmark_type == BenchmarkType.CPU:
        log_system_warnings(check_cpu_governor())

    benchmark = get_benchmark(params.benchmark_type, config.ping_provider)
    ok, reason = benchmark.validate()
    if not ok:
        raise BenchmarkError(reason)

    result = benchmark.execute(params)

    # Without thresholds there is no loss to report, only a missing latency.
    if result.ping is not None and config.thresholds is None and result.ping.received == 0:
        raise BenchmarkError(
            f"Zero responses received when sending {params.times} echo requests to {params.destination}"
        )
    return build_report(result, config.thresholds)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for sbench."""
    parser = build_argument_parser()
    try:
        config = build_run_config(argv, parser)
    except ConfigurationError as exc:
        parser.print_usage(sys.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CODE_USAGE

    configure_logging(config.verbose)

    if config.list_benchmarks:
        return list_benchmarks()

    try:
        report = run_benchmark(config)
    except BenchmarkError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CODE_CRITICAL

    print(render_json(report) if config.json_output else report.text)
    return report.exit_code
