"""Pytest fixtures for tests."""

import random
import threading
import time
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from huesync.models import BridgeConfig, CacheConfig, DeviceState, EntityKind


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sample_lights() -> list[dict]:
    return [
        {"id": str(i), "name": f"Bedroom {i}", "on": False, "brightness": 50.0, "reachable": True}
        for i in range(1, 5)
    ]


def sample_groups() -> list[dict]:
    return [
        {"id": "1", "name": "Bedroom", "kind": "room", "light_ids": ["1", "2", "3", "4"]},
        {"id": "2", "name": "Upstairs", "kind": "zone", "light_ids": ["1", "2"]},
    ]


def sample_scenes() -> list[dict]:
    return [{"id": "abc", "name": "Relax", "group_id": "1", "light_ids": ["1", "2"]}]


class FakeTransport:
    """
    In-memory DeviceTransport.

    Failures are injected per entity kind or per target id; delays make
    concurrency observable.
    """

    def __init__(self, lights=None, groups=None, scenes=None):
        self.records = {
            EntityKind.LIGHTS: sample_lights() if lights is None else lights,
            EntityKind.GROUPS: sample_groups() if groups is None else groups,
            EntityKind.SCENES: sample_scenes() if scenes is None else scenes,
        }
        self.auth_error: Exception | None = None
        self.fetch_errors: dict[EntityKind, Exception] = {}
        self.write_errors: dict[str, Exception] = {}
        self.fetch_delay = 0.0
        self.write_delay = 0.0
        self.fetch_calls: list[EntityKind] = []
        self.writes: list[tuple[EntityKind, str, DeviceState]] = []
        self.write_times: list[float] = []
        self.timeouts: list[float] = []
        self._lock = threading.Lock()

    def authenticate(self, credential: str, timeout: float) -> None:
        if self.auth_error is not None:
            raise self.auth_error

    def fetch_all(self, kind: EntityKind, timeout: float):
        with self._lock:
            self.fetch_calls.append(kind)
            self.timeouts.append(timeout)
        self._wait(self.fetch_delay, timeout)
        if kind in self.fetch_errors:
            raise self.fetch_errors[kind]
        return list(self.records[kind])

    def write(self, kind: EntityKind, target_id: str, state: DeviceState, timeout: float) -> None:
        with self._lock:
            self.write_times.append(time.monotonic())
            self.timeouts.append(timeout)
        self._wait(self.write_delay, timeout)
        if target_id in self.write_errors:
            raise self.write_errors[target_id]
        with self._lock:
            self.writes.append((kind, target_id, state))

    def _wait(self, delay: float, timeout: float) -> None:
        """Simulate network latency, giving up like a real client once the timeout expires."""
        if delay > timeout:
            time.sleep(timeout)
            raise TimeoutError(f"no response within {timeout}s")
        if delay:
            time.sleep(delay)

    def fetch_count(self, kind: EntityKind) -> int:
        return self.fetch_calls.count(kind)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    """Fixed, manually advanced clock."""
    return FakeClock()


@pytest.fixture
def rng():
    """Seeded random source for repeatable variations."""
    return random.Random(1234)


@pytest.fixture
def transport():
    """Fake transport preloaded with four bedroom lights."""
    return FakeTransport()


@pytest.fixture
def transports():
    """One fake transport per configured bridge id."""
    return {"office": FakeTransport(), "home": FakeTransport(), "garage": FakeTransport()}


@pytest.fixture
def make_transport():
    """Factory for additional fake transports."""
    return FakeTransport


@pytest.fixture
def cache_config():
    """Cache settings with a long sync interval so the background loop stays idle in tests."""
    return CacheConfig(sync_interval_seconds=3600, request_timeout_seconds=2.0)


@pytest.fixture
def bridge_configs():
    """Three enabled bridges."""
    return [
        BridgeConfig(id="office", name="Office", address="10.0.0.2", credential="k1"),
        BridgeConfig(id="home", name="Home", address="10.0.0.3", credential="k2"),
        BridgeConfig(id="garage", name="Garage", address="10.0.0.4", credential="k3"),
    ]


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path / "xdg"
