"""Test fixtures for formdata unit tests."""

import io
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

FIXED_NOW_NS = 1_700_000_000_123_456_789


# -----------------------------------------------------------------------------
# Mock sinks
# -----------------------------------------------------------------------------


@dataclass
class MockSink:
    """Append-only in-memory sink recording every write."""

    chunks: list[bytes] = field(default_factory=list)

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)

    def getvalue(self) -> bytes:
        return b"".join(self.chunks)


@dataclass
class FailingSink(MockSink):
    """Sink that raises OSError once ``fail_after`` writes have succeeded."""

    fail_after: int = 0

    def write(self, data: bytes) -> int:
        if len(self.chunks) >= self.fail_after:
            raise OSError("sink is full")
        return super().write(data)


@dataclass
class ChunkedReader:
    """Binary reader recording the sizes it was asked for."""

    data: bytes
    requested: list[int] = field(default_factory=list)
    _offset: int = 0

    def read(self, size: int = -1) -> bytes:
        self.requested.append(size)
        end = len(self.data) if size < 0 else self._offset + size
        chunk = self.data[self._offset:end]
        self._offset += len(chunk)
        return chunk


# -----------------------------------------------------------------------------
# Deterministic sources
# -----------------------------------------------------------------------------


@pytest.fixture
def sink() -> MockSink:
    return MockSink()


@pytest.fixture
def make_failing_sink() -> Callable[[int], FailingSink]:
    """Factory fixture to create sinks failing after N writes."""

    def _make(fail_after: int = 0) -> FailingSink:
        return FailingSink(fail_after=fail_after)

    return _make


@pytest.fixture
def fixed_random() -> Callable[[int], bytes]:
    """Random source returning a fixed byte pattern."""

    def _random(size: int) -> bytes:
        return bytes(range(1, size + 1))

    return _random


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    """Clock frozen at FIXED_NOW_NS."""
    return lambda: FIXED_NOW_NS


@pytest.fixture
def make_reader() -> Callable[[bytes], ChunkedReader]:
    """Factory fixture to create recording readers."""

    def _make(data: bytes) -> ChunkedReader:
        return ChunkedReader(data=data)

    return _make


class TrickleRaw(io.RawIOBase):
    """Raw sink accepting at most ``limit`` bytes per write.

    ``stall_after`` makes every later write return None, as a non-blocking
    raw stream does when it would block.
    """

    def __init__(self, limit: int = 4, stall_after: int | None = None) -> None:
        self.buf = bytearray()
        self.limit = limit
        self.stall_after = stall_after
        self.calls = 0

    def writable(self) -> bool:
        return True

    def write(self, b) -> int | None:
        self.calls += 1
        if self.stall_after is not None and self.calls > self.stall_after:
            return None
        chunk = bytes(b[: self.limit])
        self.buf += chunk
        return len(chunk)


@pytest.fixture
def make_raw_sink() -> Callable[..., TrickleRaw]:
    """Factory fixture to create raw sinks with short writes."""

    def _make(limit: int = 4, stall_after: int | None = None) -> TrickleRaw:
        return TrickleRaw(limit=limit, stall_after=stall_after)

    return _make
