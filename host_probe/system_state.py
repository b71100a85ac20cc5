"""Collect static and dynamic host information."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import platform
import socket
from typing import Dict, List, Optional

import psutil

from .measurements import usage_percent

logger = logging.getLogger(__name__)

CPU_SAMPLE_INTERVAL = 0.3


@dataclass
class DiskInfo:
    name: str
    mount_point: str
    file_system: str
    total_space: int
    available_space: int

    @property
    def used_space(self) -> int:
        return max(self.total_space - self.available_space, 0)

    @property
    def usage_percent(self) -> Optional[float]:
        return usage_percent(self.used_space, self.total_space)


@dataclass
class HostSnapshot:
    os_name: str
    kernel_version: str
    os_version: str
    host_name: str
    cpu_count: int
    cpu_brand: str
    cpu_frequency_mhz: int
    memory_total: int
    memory_used: int
    swap_total: int
    swap_used: int
    cpu_usages: List[float] = field(default_factory=list)
    disks: List[DiskInfo] = field(default_factory=list)

    @property
    def memory_free(self) -> int:
        return max(self.memory_total - self.memory_used, 0)


def collect_snapshot() -> HostSnapshot:
    """Query the platform once; missing values default to "" or 0."""
    os_release = _os_release()
    cpu_usages = _cpu_usages()
    memory = psutil.virtual_memory()
    swap = psutil.swap_memory()

    return HostSnapshot(
        os_name=os_release.get("NAME") or platform.system(),
        kernel_version=platform.release(),
        os_version=_os_version(os_release),
        host_name=_host_name(),
        cpu_count=len(cpu_usages) or psutil.cpu_count() or 0,
        cpu_brand=_cpu_brand(),
        cpu_frequency_mhz=_cpu_frequency(),
        memory_total=memory.total,
        memory_used=memory.total - memory.available,
        swap_total=swap.total,
        swap_used=swap.used,
        cpu_usages=cpu_usages,
        disks=_disk_summary(),
    )


def _os_release() -> Dict[str, str]:
    if platform.system() != "Linux":
        return {}
    try:
        return dict(platform.freedesktop_os_release())
    except OSError:
        return {}


def _os_version(os_release: Dict[str, str]) -> str:
    if os_release.get("VERSION_ID"):
        return os_release["VERSION_ID"]
    if platform.system() == "Darwin":
        return platform.mac_ver()[0]
    return platform.version()


def _host_name() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return platform.node()


def _cpu_usages() -> List[float]:
    try:
        return [float(value) for value in psutil.cpu_percent(interval=CPU_SAMPLE_INTERVAL, percpu=True)]
    except (OSError, RuntimeError):
        logger.debug("per-core cpu usage unavailable", exc_info=True)
        return []


def _cpu_brand() -> str:
    try:
        with open("/proc/cpuinfo", encoding="utf-8") as cpuinfo:
            for line in cpuinfo:
                key, _, value = line.partition(":")
                if key.strip() == "model name":
                    return value.strip()
    except OSError:
        pass
    return platform.processor()


def _cpu_frequency() -> int:
    try:
        freq = psutil.cpu_freq()
    except (OSError, RuntimeError, NotImplementedError):
        logger.debug("cpu frequency unavailable", exc_info=True)
        return 0
    return int(freq.current) if freq else 0


def _disk_summary() -> List[DiskInfo]:
    disks: List[DiskInfo] = []
    for partition in psutil.disk_partitions(all=False):
        try:
            usage = psutil.disk_usage(partition.mountpoint)
            total, available = usage.total, usage.free
        except OSError:
            # Unreadable mount points are still listed, with no capacity.
            logger.debug("disk usage unavailable for %s", partition.mountpoint, exc_info=True)
            total, available = 0, 0
        disks.append(
            DiskInfo(
                name=partition.device,
                mount_point=partition.mountpoint,
                file_system=partition.fstype,
                total_space=total,
                available_space=available,
            )
        )
    return disks
