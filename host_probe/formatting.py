"""Console-friendly formatting of the host report and network samples."""

from __future__ import annotations

from typing import Iterable, List

from .measurements import Measurement, bytes_to_gb, bytes_to_mb
from .network import IpLookup
from .system_state import DiskInfo, HostSnapshot

FAILED_SUFFIX = " (measurement failed)"


def section(title: str) -> str:
    return f"=== {title} ==="


def format_system(snapshot: HostSnapshot) -> str:
    lines = [
        section("SYSTEM INFORMATION"),
        f"System name: {snapshot.os_name}",
        f"Kernel version: {snapshot.kernel_version}",
        f"OS version: {snapshot.os_version}",
        f"Host name: {snapshot.host_name}",
    ]
    return "\n".join(lines)


def format_cpu(snapshot: HostSnapshot) -> str:
    lines = [
        section("CPU INFORMATION"),
        f"CPU Count: {snapshot.cpu_count}",
        f"CPU Brand: {snapshot.cpu_brand}",
        f"CPU Frequency: {snapshot.cpu_frequency_mhz} MHz",
    ]
    lines.extend(f"CPU {index}: {usage}% usage" for index, usage in enumerate(snapshot.cpu_usages))
    return "\n".join(lines)


def format_memory(snapshot: HostSnapshot) -> str:
    lines = [
        section("MEMORY INFORMATION"),
        f"Total Memory: {bytes_to_mb(snapshot.memory_total)} MB",
        f"Used Memory: {bytes_to_mb(snapshot.memory_used)} MB",
        f"Free Memory: {bytes_to_mb(snapshot.memory_free)} MB",
        f"Total Swap: {bytes_to_mb(snapshot.swap_total)} MB",
        f"Used Swap: {bytes_to_mb(snapshot.swap_used)} MB",
    ]
    return "\n".join(lines)


def format_disk(disk: DiskInfo) -> str:
    lines = [
        f"Disk name: {disk.name}",
        f"  Mount point: {disk.mount_point}",
        f"  File system: {disk.file_system}",
        f"  Total space: {bytes_to_gb(disk.total_space)} GB",
        f"  Available space: {bytes_to_gb(disk.available_space)} GB",
        f"  Used space: {bytes_to_gb(disk.used_space)} GB",
    ]
    percent = disk.usage_percent
    if percent is not None:
        lines.append(f"  Usage: {percent:.2f}%")
    return "\n".join(lines)


def format_disks(disks: Iterable[DiskInfo]) -> str:
    lines: List[str] = [section("DISK INFORMATION")]
    for disk in disks:
        lines.append(format_disk(disk))
        lines.append("")
    return "\n".join(lines)


def format_snapshot(snapshot: HostSnapshot) -> str:
    return "\n\n".join(
        [format_system(snapshot), format_cpu(snapshot), format_memory(snapshot), format_disks(snapshot.disks)]
    )


def format_ip(lookup: IpLookup) -> str:
    if lookup.ok:
        return f"Your external IP address is: {lookup.address}"
    return f"Failed to get IP address. Status: {lookup.status_code}"


def format_measurement(measurement: Measurement, unit: str) -> str:
    text = f"{measurement.value:.2f} {unit}"
    return text if measurement.ok else text + FAILED_SUFFIX
