"""Shared fixtures and fake byte sources."""

import io

import pytest

from streamlocate.utils.config import reset_config
from streamlocate.utils.logging import configure_logging


def pytest_configure(config):
    configure_logging(log_level="WARNING", log_format="console", log_output="stderr")


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate every test from environment overrides and cached config."""
    for var in ("STREAMLOCATE_CHUNK_SIZE", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


class CountingSource:
    """Sequential, non-seekable source that records every read call."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)
        self.read_calls = 0
        self.bytes_served = 0
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        self.read_calls += 1
        chunk = self._buffer.read(size)
        self.bytes_served += len(chunk)
        return chunk

    def close(self) -> None:
        self.closed = True


class FailingSource(CountingSource):
    """CountingSource that raises OSError on selected read calls (1-based)."""

    def __init__(self, data: bytes, fail_on):
        super().__init__(data)
        self.fail_on = set(fail_on)

    def read(self, size: int = -1) -> bytes:
        if self.read_calls + 1 in self.fail_on:
            self.fail_on.discard(self.read_calls + 1)
            raise OSError("simulated read failure")
        return super().read(size)


@pytest.fixture
def counting_source():
    return CountingSource


@pytest.fixture
def failing_source():
    return FailingSource
