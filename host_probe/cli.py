"""Entry point for the host-probe command line tool."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional, Sequence

import requests
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_TIMEOUT, ProbeConfig
from .formatting import format_ip, format_measurement, format_snapshot, section
from .logging_setup import configure_logging
from .measurements import Measurement, SpeedResult, bytes_to_gb, bytes_to_mb
from .network import IpLookup, NetworkProber
from .system_state import HostSnapshot, collect_snapshot

logger = logging.getLogger(__name__)


def positive_seconds(value: str) -> float:
    seconds = float(value)
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="host-probe",
        description="Print host diagnostics and a quick network speed sample.",
    )
    parser.add_argument("--json", action="store_true", help="emit one JSON document instead of text")
    parser.add_argument("--ui", action="store_true", help="render the report with Rich tables")
    parser.add_argument("--skip-network", action="store_true", help="only collect host information")
    parser.add_argument(
        "--timeout",
        type=positive_seconds,
        default=DEFAULT_TIMEOUT,
        help="per-request timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    return parser


def build_prober(timeout: float) -> NetworkProber:
    return NetworkProber(ProbeConfig(timeout=timeout))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    snapshot = collect_snapshot()
    prober = None if args.skip_network else build_prober(args.timeout)
    try:
        if args.json:
            _run_json(snapshot, prober)
        elif args.ui:
            _run_rich(snapshot, prober)
        else:
            _run_text(snapshot, prober)
    except requests.RequestException as exc:
        logger.error("external IP lookup failed: %s", exc)
        raise SystemExit(1) from exc
    finally:
        if prober is not None:
            prober.close()


def _run_text(snapshot: HostSnapshot, prober: Optional[NetworkProber]) -> None:
    print(format_snapshot(snapshot))
    if prober is None:
        return

    print("\n" + section("EXTERNAL IP"))
    print("Fetching your external IP address...")
    print(format_ip(prober.fetch_external_ip()))

    print("\n" + section("NETWORK SPEED TEST"))
    print("Running network speed test (this may take a moment)...")
    print("Testing download speed...")
    print(f"Download speed: {format_measurement(prober.measure_download(), 'Mbps')}")
    print("Testing upload speed...")
    print(f"Upload speed: {format_measurement(prober.measure_upload(), 'Mbps')}")
    print("Testing ping...")
    print(f"Ping: {format_measurement(prober.measure_ping(), 'ms')}")


def _run_json(snapshot: HostSnapshot, prober: Optional[NetworkProber]) -> None:
    lookup = prober.fetch_external_ip() if prober else None
    result = prober.run_probe() if prober else None
    print(_to_json(snapshot, lookup, result))


def _to_json(snapshot: HostSnapshot, lookup: Optional[IpLookup], result: Optional[SpeedResult]) -> str:
    snapshot_dict: Dict[str, Any] = asdict(snapshot)
    for disk_dict, disk in zip(snapshot_dict["disks"], snapshot.disks):
        disk_dict["used_space"] = disk.used_space
        disk_dict["usage_percent"] = disk.usage_percent
    payload: Dict[str, Any] = {
        "snapshot": snapshot_dict,
        "external_ip": asdict(lookup) if lookup else None,
        "speed": asdict(result) if result else None,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _run_rich(snapshot: HostSnapshot, prober: Optional[NetworkProber]) -> None:
    console = Console()

    console.print(Panel(f"{snapshot.host_name} - {snapshot.os_name} {snapshot.os_version}", style="bold cyan"))

    summary = Table(show_header=False, box=box.ROUNDED)
    summary.add_row("Kernel", snapshot.kernel_version)
    summary.add_row("CPU", f"{snapshot.cpu_brand} | {snapshot.cpu_count} cores @ {snapshot.cpu_frequency_mhz} MHz")
    summary.add_row(
        "Memory",
        f"{bytes_to_mb(snapshot.memory_used)} / {bytes_to_mb(snapshot.memory_total)} MB "
        f"(free {bytes_to_mb(snapshot.memory_free)} MB)",
    )
    summary.add_row("Swap", f"{bytes_to_mb(snapshot.swap_used)} / {bytes_to_mb(snapshot.swap_total)} MB")
    console.print(summary)

    if snapshot.cpu_usages:
        cores = Table(title="CPU usage", box=box.SIMPLE_HEAD)
        cores.add_column("Core", justify="right")
        cores.add_column("Usage", justify="right")
        for index, usage in enumerate(snapshot.cpu_usages):
            cores.add_row(str(index), f"{usage:.1f}%")
        console.print(cores)

    if snapshot.disks:
        disk_table = Table(title="Disks", box=box.SIMPLE_HEAD)
        disk_table.add_column("Device", style="bold")
        disk_table.add_column("Mount point")
        disk_table.add_column("File system")
        disk_table.add_column("Used / Total")
        disk_table.add_column("Usage", justify="right")
        for disk in snapshot.disks:
            percent = disk.usage_percent
            disk_table.add_row(
                disk.name,
                disk.mount_point,
                disk.file_system,
                f"{bytes_to_gb(disk.used_space)} / {bytes_to_gb(disk.total_space)} GB",
                "-" if percent is None else f"{percent:.2f}%",
            )
        console.print(disk_table)

    if prober is None:
        return

    with console.status("Fetching your external IP address..."):
        lookup = prober.fetch_external_ip()
    console.print(Panel(format_ip(lookup), style="bold green" if lookup.ok else "bold red"))

    speed = Table(title="Network speed test", box=box.SIMPLE_HEAD)
    speed.add_column("Test", style="bold")
    speed.add_column("Result", justify="right")
    with console.status("Testing download speed..."):
        download = prober.measure_download()
    with console.status("Testing upload speed..."):
        upload = prober.measure_upload()
    with console.status("Testing ping..."):
        ping = prober.measure_ping()
    speed.add_row("Download", _rich_measurement(download, "Mbps"))
    speed.add_row("Upload", _rich_measurement(upload, "Mbps"))
    speed.add_row("Ping", _rich_measurement(ping, "ms"))
    console.print(speed)


def _rich_measurement(measurement: Measurement, unit: str) -> str:
    if measurement.ok:
        return f"{measurement.value:.2f} {unit}"
    return f"[red]N/A[/red] ({escape(measurement.error or '')})"


if __name__ == "__main__":
    main()
