"""Public API for the Chromium .pak resource archive codec."""

from __future__ import annotations

from .config import PakSettings, get_settings
from .decoder import PakHeader, decode, decode_bytes, read_file, read_header, read_index
from .encoder import build_index, encode, write, write_file
from .errors import (
    PakConfigError,
    PakError,
    PakFormatError,
    PakIOError,
    PakValueError,
    PreconditionError,
    ResourceBudgetExceeded,
    StructuralError,
    TruncationError,
)
from .model import Encoding, IndexEntry, ResourceTable, TerminalEntry
from .resource_limits import ResourceBudget

__all__ = [
    "PakSettings",
    "get_settings",
    "PakHeader",
    "decode",
    "decode_bytes",
    "read_file",
    "read_header",
    "read_index",
    "build_index",
    "encode",
    "write",
    "write_file",
    "PakConfigError",
    "PakError",
    "PakFormatError",
    "PakIOError",
    "PakValueError",
    "PreconditionError",
    "ResourceBudgetExceeded",
    "StructuralError",
    "TruncationError",
    "Encoding",
    "IndexEntry",
    "ResourceTable",
    "TerminalEntry",
    "ResourceBudget",
]
