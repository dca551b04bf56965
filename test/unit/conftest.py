"""Test fixtures for robyn-uploadfiles unit tests."""

import io
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from uploadfiles.models.core import RawFileDescriptor, UploadConfig


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self._data[key]


@dataclass
class MockRequest:
    """Mock Request object for Robyn with decoded multipart files."""

    files: dict[str, bytes] = field(default_factory=dict)
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/files/upload"


class TrackingStream(io.BytesIO):
    """BytesIO that registers itself so tests can assert it was closed."""

    def __init__(self, data: bytes, registry: list) -> None:
        super().__init__(data)
        registry.append(self)


# -----------------------------------------------------------------------------
# Upload fixtures
# -----------------------------------------------------------------------------


FIXED_NOW = datetime(2024, 3, 7, 9, 5, 2)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def opened_streams() -> list[TrackingStream]:
    return []


@pytest.fixture
def make_descriptor(opened_streams: list[TrackingStream]):
    """Factory fixture to create raw descriptors backed by in-memory content."""

    def _make(filename: str, content: bytes | int = b"", header: dict | None = None) -> RawFileDescriptor:
        data = b"x" * content if isinstance(content, int) else content
        return RawFileDescriptor(
            filename=filename,
            size=len(data),
            opener=lambda: TrackingStream(data, opened_streams),
            header=header or {"Content-Type": "text/plain"},
        )

    return _make


@pytest.fixture
def sized_fields(make_descriptor) -> dict[str, list[RawFileDescriptor]]:
    """Three fields carrying 5, 10 and 15 byte files."""
    return {
        "a": [make_descriptor("data1.txt", b"abcde")],
        "b": [make_descriptor("data2.txt", b"abcdefghij")],
        "c": [make_descriptor("data3.txt", b"abcdefghijklmno")],
    }


@pytest.fixture
def make_config(tmp_path):
    """Factory fixture for configs whose destination lives under tmp_path."""

    def _make(template: str = "%f", **kwargs) -> UploadConfig:
        destination = str(tmp_path / template) if template else ""
        return UploadConfig(destination=destination, **kwargs)

    return _make


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock requests."""

    def _make(files: dict[str, bytes] | None = None) -> MockRequest:
        return MockRequest(files=files or {})

    return _make
