"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the linesense test suite.
"""
import random
from datetime import datetime, timezone

import pytest

from linesense.collector.readers.base import ReadingSource
from linesense.monitor.config import MonitorConfig
from linesense.shared.exceptions import FeedUnavailable
from linesense.shared.models import Reading
from linesense.topology.graph import Node, Topology


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def make_reading(now):
    """Factory for readings that default to a healthy line."""
    def _make(voltage=230.0, current=10.0, vibration=0.2):
        return Reading(voltage=voltage, current=current, vibration=vibration, timestamp=now)
    return _make


@pytest.fixture
def normal_reading(make_reading) -> Reading:
    return make_reading()


@pytest.fixture
def line_break_reading(make_reading) -> Reading:
    """The reference scenario: only the current is out of band."""
    return make_reading(voltage=230.0, current=17.0, vibration=0.3)


@pytest.fixture
def small_topology() -> Topology:
    """Six poles in a ring carrying the default designated ids."""
    nodes = [
        Node(id=1, name="TVM Central", lat=8.5244, lng=76.9366),
        Node(id=2, name="Neyyattinkara", lat=8.3405, lng=76.8723),
        Node(id=3, name="Nemom", lat=8.4847, lng=76.9489),
        Node(id=16, name="Kollam City", lat=8.8932, lng=76.6141),
        Node(id=17, name="Paravur", lat=8.9673, lng=76.6451),
        Node(id=59, name="Ernakulam", lat=9.9816, lng=76.2835),
    ]
    edges = [(1, 2), (2, 3), (3, 16), (16, 17), (17, 59), (59, 1)]
    return Topology(nodes, edges, name="test-ring")


@pytest.fixture
def monitor_config() -> MonitorConfig:
    return MonitorConfig(poll_interval=0.01, random_seed=7)


class StubSource(ReadingSource):
    """Reading source that replays a fixed script of readings or errors."""

    def __init__(self, *items):
        self.items = list(items)
        self.calls = 0
        self.closed = False

    async def get_reading(self) -> Reading:
        self.calls += 1
        item = self.items.pop(0) if len(self.items) > 1 else self.items[0]
        if isinstance(item, Exception):
            raise item
        return item

    def check_health(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def stub_source():
    return StubSource


@pytest.fixture
def failing_source():
    return StubSource(FeedUnavailable("connection refused"))
