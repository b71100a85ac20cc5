"""Endpoints and sampling parameters for the network probe."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TIMEOUT = 30.0


@dataclass
class ProbeConfig:
    ip_url: str = "https://api.ipify.org"
    download_base_url: str = "https://speed.cloudflare.com/__down"
    download_bytes: int = 100_000_000
    upload_url: str = "https://speed.cloudflare.com/__up"
    upload_bytes: int = 10_000_000
    ping_url: str = "https://www.cloudflare.com"
    ping_attempts: int = 4
    ping_delay: float = 0.5
    timeout: float = DEFAULT_TIMEOUT
    chunk_size: int = 64 * 1024

    @property
    def download_url(self) -> str:
        return f"{self.download_base_url}?bytes={self.download_bytes}"
