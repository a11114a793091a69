import struct

import pytest

from chromepak.config import get_settings


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "property: hypothesis-driven property tests")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in (
        "CHROMEPAK_MAX_RESOURCES",
        "CHROMEPAK_MAX_RESOURCE_BYTES",
        "CHROMEPAK_MAX_TOTAL_BYTES",
        "CHROMEPAK_STRICT_OFFSETS",
        "CHROMEPAK_READ_CHUNK_SIZE",
        "CHROMEPAK_LOG_LEVEL",
        "CHROMEPAK_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def build_pak(version, encoding, entries, payload=b""):
    """Assemble raw archive bytes from explicit header and index values."""

    header = struct.pack("<IIB", version, len(entries) - 1, encoding)
    index = b"".join(struct.pack("<HI", resource_id, offset) for resource_id, offset in entries)
    return header + index + payload


@pytest.fixture
def raw_pak():
    return build_pak
