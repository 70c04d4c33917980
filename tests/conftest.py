"""Pytest fixtures: in-memory stand-ins for the serial port and the display."""

from collections import deque

import pytest
from serial import SerialException


class FakeSerial:
    """Serves canned chunks, then ends the stream with EOFError or ``error``."""

    def __init__(self, chunks=(), error=None, fail_on=(), fail_with=SerialException):
        self.chunks = deque(chunks)
        self.error = error
        self.fail_on = set(fail_on)
        self.fail_with = fail_with
        self.written = bytearray()
        self.calls = []

    @property
    def in_waiting(self):
        return len(self.chunks[0]) if self.chunks else 0

    def read(self, length):
        self.calls.append("read")
        if self.chunks:
            return self.chunks.popleft()
        raise (self.error if self.error is not None else EOFError())

    def write(self, data):
        self._step("write")
        self.written += data
        return len(data)

    def _step(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_with(f"{name} failed")

    def cancel_read(self):
        self._step("cancel_read")

    def flush(self):
        self._step("flush")

    def close(self):
        self._step("close")


class CaptureDisplay:
    """Records every call made on it as (method, *args)."""

    def __init__(self):
        self.calls = []

    def log(self, message, kind="data"):
        self.calls.append(("log", message, kind))

    def show_reading(self, reading):
        self.calls.append(("show_reading", reading))

    def show_color(self, color, position):
        self.calls.append(("show_color", color, position))

    def clear(self):
        self.calls.append(("clear",))

    def of(self, method):
        return [call[1:] for call in self.calls if call[0] == method]


@pytest.fixture
def display():
    return CaptureDisplay()


@pytest.fixture
def make_serial():
    """Factory for a FakeSerial preloaded with byte chunks."""

    def _make(*chunks, error=None, fail_on=(), fail_with=SerialException):
        return FakeSerial(chunks, error=error, fail_on=fail_on, fail_with=fail_with)

    return _make
