"""Binary layout constants for Chromium .pak archives."""

from __future__ import annotations

import struct

HEADER_STRUCT = struct.Struct("<IIB")
INDEX_ENTRY_STRUCT = struct.Struct("<HI")
HEADER_SIZE = HEADER_STRUCT.size
INDEX_ENTRY_SIZE = INDEX_ENTRY_STRUCT.size

VERSION_STRUCT = struct.Struct("<I")
COUNT_STRUCT = struct.Struct("<I")
ENCODING_STRUCT = struct.Struct("<B")

MAX_RESOURCE_ID = 0xFFFF
MAX_OFFSET = 0xFFFFFFFF
MAX_VERSION = 0xFFFFFFFF
MAX_ENCODING = 0xFF
TERMINAL_ID = 0


def index_size(resource_count: int) -> int:
    """Return the byte length of an index holding *resource_count* entries."""

    # one extra entry for the terminal sentinel
    return INDEX_ENTRY_SIZE * (resource_count + 1)


def data_start(resource_count: int) -> int:
    """Return the offset where payload data begins for *resource_count* resources."""

    return HEADER_SIZE + index_size(resource_count)


__all__ = [
    "HEADER_STRUCT",
    "INDEX_ENTRY_STRUCT",
    "HEADER_SIZE",
    "INDEX_ENTRY_SIZE",
    "VERSION_STRUCT",
    "COUNT_STRUCT",
    "ENCODING_STRUCT",
    "MAX_RESOURCE_ID",
    "MAX_OFFSET",
    "MAX_VERSION",
    "MAX_ENCODING",
    "TERMINAL_ID",
    "index_size",
    "data_start",
]
