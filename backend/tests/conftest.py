import pytest

from crowdguess import config
from crowdguess.store import MemoryStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(config, "STORE_RETRY_DELAY_MS", 0)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return MemoryStore(clock=clock)
