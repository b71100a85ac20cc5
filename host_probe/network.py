"""Sequential network characterization: external IP, throughput and latency samples."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable, List, Optional

import requests

from .config import ProbeConfig
from .measurements import Measurement, SpeedResult, mean_latency, throughput_mbps

logger = logging.getLogger(__name__)

# Errors that degrade a sample to a failed measurement instead of aborting.
SAMPLE_ERRORS = (requests.RequestException, ValueError, ZeroDivisionError)


@dataclass
class IpLookup:
    address: Optional[str]
    status_code: int

    @property
    def ok(self) -> bool:
        return self.address is not None


class NetworkProber:
    """Runs one best-effort sample of each network measurement, strictly in order."""

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or ProbeConfig()
        self.session = session or requests.Session()
        self._clock = clock
        self._sleep = sleep

    def fetch_external_ip(self) -> IpLookup:
        """Resolve the public address. Transport errors propagate to the caller."""
        response = self.session.get(self.config.ip_url, timeout=self.config.timeout)
        if 200 <= response.status_code < 300:
            return IpLookup(address=response.text.strip(), status_code=response.status_code)
        logger.warning("external ip lookup returned status %s", response.status_code)
        return IpLookup(address=None, status_code=response.status_code)

    def measure_download(self) -> Measurement:
        start = self._clock()
        try:
            with self.session.get(self.config.download_url, stream=True, timeout=self.config.timeout) as response:
                response.raise_for_status()
                received = 0
                for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                    received += len(chunk)
            return Measurement.measured(throughput_mbps(received, self._clock() - start))
        except SAMPLE_ERRORS as exc:
            logger.warning("download sample failed: %s", exc)
            return Measurement.failed(_describe(exc))

    def measure_upload(self) -> Measurement:
        payload = bytes(self.config.upload_bytes)
        start = self._clock()
        try:
            with self.session.post(
                self.config.upload_url, data=payload, stream=True, timeout=self.config.timeout
            ) as response:
                elapsed = self._clock() - start
                response.raise_for_status()
            return Measurement.measured(throughput_mbps(len(payload), elapsed))
        except SAMPLE_ERRORS as exc:
            logger.warning("upload sample failed: %s", exc)
            return Measurement.failed(_describe(exc))

    def measure_ping(self) -> Measurement:
        latencies: List[float] = []
        last_error = "no attempts"
        for attempt in range(self.config.ping_attempts):
            if attempt:
                self._sleep(self.config.ping_delay)
            start = self._clock()
            try:
                with self.session.get(self.config.ping_url, stream=True, timeout=self.config.timeout):
                    elapsed = self._clock() - start
            except requests.RequestException as exc:
                logger.warning("ping attempt %d failed: %s", attempt + 1, exc)
                last_error = _describe(exc)
                continue
            latencies.append(elapsed * 1000)
            logger.debug("ping attempt %d took %.0f ms", attempt + 1, latencies[-1])

        if not latencies:
            return Measurement.failed(last_error)
        return Measurement.measured(mean_latency(latencies))

    def run_probe(self) -> SpeedResult:
        """Download, upload, then ping; each one only after the previous finished."""
        download = self.measure_download()
        upload = self.measure_upload()
        ping = self.measure_ping()
        return SpeedResult(download=download, upload=upload, ping=ping)

    def close(self) -> None:
        self.session.close()


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__
