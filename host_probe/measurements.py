"""Unit conversions and measurement arithmetic shared by the report and the prober."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


def bytes_to_mb(num: int) -> int:
    # Truncating on purpose: 1_048_575 bytes is 0 MB.
    return int(num) // 1024 // 1024


def bytes_to_gb(num: int) -> int:
    return int(num) // 1024 // 1024 // 1024


def usage_percent(used: int, total: int) -> Optional[float]:
    if total <= 0:
        return None
    return used / total * 100


def throughput_mbps(num_bytes: int, seconds: float) -> float:
    """Megabits per second for ``num_bytes`` transferred in ``seconds``."""
    if seconds <= 0:
        raise ZeroDivisionError("elapsed time must be positive")
    return num_bytes * 8 / seconds / 1_000_000


def mean_latency(samples_ms: Iterable[float]) -> float:
    samples = list(samples_ms)
    if not samples:
        return 0.0
    return sum(samples) / len(samples)


@dataclass(frozen=True)
class Measurement:
    value: float = 0.0
    error: Optional[str] = None

    @classmethod
    def measured(cls, value: float) -> "Measurement":
        return cls(value=float(value))

    @classmethod
    def failed(cls, cause: str) -> "Measurement":
        return cls(value=0.0, error=cause)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SpeedResult:
    download: Measurement
    upload: Measurement
    ping: Measurement

    @property
    def download_mbps(self) -> float:
        return self.download.value

    @property
    def upload_mbps(self) -> float:
        return self.upload.value

    @property
    def ping_ms(self) -> float:
        return self.ping.value
