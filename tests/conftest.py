import sys
from pathlib import Path

# Ensure project modules import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from config import Config
from engine import AnimationScheduler, PollingTimer
from graph import Graph


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _restore_config():
    """Undo any Config overrides a test makes."""
    saved = Config.snapshot()
    yield
    Config.apply(saved)


@pytest.fixture
def graph() -> Graph:
    return Graph.default()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer(clock) -> PollingTimer:
    return PollingTimer(clock=clock)


@pytest.fixture
def scheduler(graph, timer) -> AnimationScheduler:
    return AnimationScheduler(graph, timer=timer, base_interval=1.0, speed=1.0)
