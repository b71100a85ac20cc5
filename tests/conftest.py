from typing import Any, Dict, List

import pytest
import requests

from host_probe.config import ProbeConfig
from host_probe.network import NetworkProber
from host_probe.system_state import DiskInfo, HostSnapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", chunks=()) -> None:
        self.status_code = status_code
        self.text = text
        self._chunks = list(chunks)
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size: int = 1):
        yield from self._chunks

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FakeSession:
    """Replays scripted outcomes per URL; the last outcome repeats once the script runs out."""

    def __init__(self, clock: FakeClock, routes: Dict[str, List[Any]]) -> None:
        self.clock = clock
        self.routes = {url: list(outcomes) for url, outcomes in routes.items()}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, None, kwargs)

    def post(self, url: str, data: bytes = b"", **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, data, kwargs)

    def close(self) -> None:
        self.closed = True

    def _dispatch(self, method: str, url: str, data: Any, kwargs: Dict[str, Any]) -> FakeResponse:
        self.calls.append({"method": method, "url": url, "data": data, **kwargs})
        outcomes = self.routes[url]
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        outcome = dict(outcome)
        self.clock.advance(outcome.pop("delay", 0.0))
        return FakeResponse(**outcome)


@pytest.fixture
def make_prober():
    def factory(routes: Dict[str, List[Any]], config: ProbeConfig = None):
        config = config or ProbeConfig()
        clock = FakeClock()
        session = FakeSession(clock, routes)
        sleeps: List[float] = []
        prober = NetworkProber(config, session=session, clock=clock, sleep=sleeps.append)
        return prober, session, sleeps

    return factory


@pytest.fixture
def make_snapshot():
    def factory(**overrides: Any) -> HostSnapshot:
        values: Dict[str, Any] = dict(
            os_name="Ubuntu",
            kernel_version="6.8.0-45-generic",
            os_version="24.04",
            host_name="build-box",
            cpu_count=2,
            cpu_brand="AMD EPYC 7B13",
            cpu_frequency_mhz=2450,
            memory_total=16 * 1024**3,
            memory_used=6 * 1024**3,
            swap_total=2 * 1024**3,
            swap_used=0,
            cpu_usages=[12.5, 3.0],
            disks=[
                DiskInfo(
                    name="/dev/nvme0n1p2",
                    mount_point="/",
                    file_system="ext4",
                    total_space=500 * 1024**3,
                    available_space=125 * 1024**3,
                )
            ],
        )
        values.update(overrides)
        return HostSnapshot(**values)

    return factory
