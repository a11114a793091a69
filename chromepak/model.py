"""In-memory representation of a .pak resource table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Dict, Iterator, List, Mapping, Optional, Union

from .errors import PakValueError
from .format import MAX_ENCODING, MAX_RESOURCE_ID, MAX_VERSION, TERMINAL_ID


class Encoding(IntEnum):
    """Text encoding tag stored in the archive header."""

    BINARY = 0
    UTF8 = 1
    UTF16 = 2


EncodingTag = Union[Encoding, int]


def validate_resource_id(resource_id: int) -> int:
    if isinstance(resource_id, bool) or not isinstance(resource_id, int):
        raise PakValueError(
            f"resource id must be an integer, got {type(resource_id).__name__}",
            {"resource_id": resource_id},
        )
    if resource_id == TERMINAL_ID:
        raise PakValueError(
            "resource id 0 is reserved for the index terminator",
            {"resource_id": resource_id},
        )
    if not 0 < resource_id <= MAX_RESOURCE_ID:
        raise PakValueError(
            f"resource id {resource_id} does not fit in 16 bits",
            {"resource_id": resource_id},
        )
    return resource_id


def validate_version(version: int) -> int:
    if isinstance(version, bool) or not isinstance(version, int):
        raise PakValueError("format version must be an integer", {"version": version})
    if not 0 <= version <= MAX_VERSION:
        raise PakValueError(
            f"format version {version} does not fit in 32 bits", {"version": version}
        )
    return version


def coerce_encoding(value: int) -> EncodingTag:
    """Return the :class:`Encoding` member for *value*, or *value* itself if unknown."""

    try:
        return Encoding(value)
    except ValueError:
        return value


def validate_encoding(encoding: int) -> EncodingTag:
    if isinstance(encoding, bool) or not isinstance(encoding, int):
        raise PakValueError("encoding tag must be an integer", {"encoding": encoding})
    if not 0 <= encoding <= MAX_ENCODING:
        raise PakValueError(
            f"encoding tag {encoding} does not fit in 8 bits", {"encoding": encoding}
        )
    return coerce_encoding(encoding)


def validate_payload(resource_id: int, data: object) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise PakValueError(
            f"resource {resource_id} payload must be bytes-like, got {type(data).__name__}",
            {"resource_id": resource_id},
        )
    return bytes(data)


@dataclass(frozen=True)
class IndexEntry:
    """Index record pointing at the start of one resource's data."""

    resource_id: int
    offset: int


@dataclass(frozen=True)
class TerminalEntry:
    """Final index record carrying the end offset of the last resource."""

    offset: int
    resource_id: ClassVar[int] = TERMINAL_ID


IndexRecord = Union[IndexEntry, TerminalEntry]


@dataclass
class ResourceTable:
    """Resource identifiers mapped to opaque payloads, plus header fields.

    The table owns its mapping: values passed in are copied into immutable
    ``bytes`` and every identifier is checked against the 1..65535 domain.
    Iteration yields identifiers in ascending order, which is also the order
    the encoder serializes them in.
    """

    version: int = 0
    encoding: EncodingTag = Encoding.BINARY
    resources: Dict[int, bytes] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.version = validate_version(self.version)
        self.encoding = validate_encoding(self.encoding)
        source: Mapping[int, bytes] = self.resources
        self.resources = {}
        for resource_id, data in source.items():
            self.set(resource_id, data)

    def set(self, resource_id: int, data: bytes) -> None:
        validate_resource_id(resource_id)
        self.resources[resource_id] = validate_payload(resource_id, data)

    def remove(self, resource_id: int) -> bytes:
        return self.resources.pop(resource_id)

    def get(self, resource_id: int, default: Optional[bytes] = None) -> Optional[bytes]:
        return self.resources.get(resource_id, default)

    def ids(self) -> List[int]:
        return sorted(self.resources)

    def total_payload_size(self) -> int:
        return sum(len(data) for data in self.resources.values())

    def __getitem__(self, resource_id: int) -> bytes:
        return self.resources[resource_id]

    def __setitem__(self, resource_id: int, data: bytes) -> None:
        self.set(resource_id, data)

    def __delitem__(self, resource_id: int) -> None:
        del self.resources[resource_id]

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self.resources

    def __len__(self) -> int:
        return len(self.resources)

    def __iter__(self) -> Iterator[int]:
        return iter(self.ids())


__all__ = [
    "Encoding",
    "EncodingTag",
    "IndexEntry",
    "TerminalEntry",
    "IndexRecord",
    "ResourceTable",
    "coerce_encoding",
    "validate_resource_id",
    "validate_version",
    "validate_encoding",
    "validate_payload",
]
