"""Parse Chromium .pak archives into :class:`ResourceTable` instances."""

from __future__ import annotations

import io
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

from .config import get_settings
from .errors import PakIOError, StructuralError, TruncationError
from .format import (
    COUNT_STRUCT,
    ENCODING_STRUCT,
    INDEX_ENTRY_STRUCT,
    MAX_OFFSET,
    TERMINAL_ID,
    VERSION_STRUCT,
    data_start,
)
from .logging_config import get_logger
from .model import (
    Encoding,
    EncodingTag,
    IndexEntry,
    IndexRecord,
    ResourceTable,
    TerminalEntry,
    coerce_encoding,
)
from .resource_limits import ResourceBudget

logger = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class PakHeader:
    """Fixed-size header at the start of every archive."""

    version: int
    resource_count: int
    encoding: EncodingTag


def _read(stream: BinaryIO, size: int) -> bytes:
    try:
        data = stream.read(size)
    except OSError as exc:
        raise PakIOError(f"stream read failed: {exc}", {"requested": size}) from exc
    return data or b""


def _read_exact(stream: BinaryIO, length: int, chunk_size: int) -> bytes:
    """Read up to *length* bytes, retrying short reads until EOF."""

    # Bounded reads keep a corrupt length from allocating gigabytes up front.
    buffer = bytearray()
    remaining = length
    while remaining:
        chunk = _read(stream, min(remaining, chunk_size))
        if not chunk:
            break
        buffer += chunk
        remaining -= len(chunk)
    return bytes(buffer)


def _read_struct(stream: BinaryIO, layout: struct.Struct, field: str) -> Tuple[int, ...]:
    data = _read_exact(stream, layout.size, layout.size)
    if len(data) != layout.size:
        raise TruncationError(
            f"stream truncated while reading {field} "
            f"(expected {layout.size} bytes, got {len(data)})",
            field=field,
        )
    return layout.unpack(data)


def _read_payload(stream: BinaryIO, resource_id: int, length: int, chunk_size: int) -> bytes:
    payload = _read_exact(stream, length, chunk_size)
    if len(payload) != length:
        raise TruncationError(
            f"stream truncated while reading resource id={resource_id} "
            f"(expected {length} bytes, got {len(payload)})",
            resource_id=resource_id,
            details={"expected": length, "received": len(payload)},
        )
    return payload


def read_header(stream: BinaryIO) -> PakHeader:
    """Read the 9-byte header from *stream*."""

    (version,) = _read_struct(stream, VERSION_STRUCT, "format_version")
    (resource_count,) = _read_struct(stream, COUNT_STRUCT, "resource_count")
    (encoding,) = _read_struct(stream, ENCODING_STRUCT, "encoding")
    tag = coerce_encoding(encoding)
    if not isinstance(tag, Encoding):
        logger.warning("unknown encoding tag %d, passing through", encoding)
    return PakHeader(version=version, resource_count=resource_count, encoding=tag)


def read_index(
    stream: BinaryIO,
    *,
    limits: Optional[ResourceBudget] = None,
    strict_offsets: Optional[bool] = None,
) -> Tuple[PakHeader, Tuple[IndexRecord, ...]]:
    """Read the header and index, leaving *stream* positioned at the payload data.

    The returned index holds one :class:`IndexEntry` per resource, in stream
    order, followed by the :class:`TerminalEntry`.
    """

    settings = get_settings()
    budget = limits if limits is not None else ResourceBudget.from_settings(settings)
    strict = settings.strict_offsets if strict_offsets is None else strict_offsets

    header = read_header(stream)
    budget.ensure_resources(header.resource_count)

    raw: List[Tuple[int, ...]] = []
    for position in range(header.resource_count + 1):
        raw.append(_read_struct(stream, INDEX_ENTRY_STRUCT, f"index entry {position}"))

    terminal_id, terminal_offset = raw[-1]
    if terminal_id != TERMINAL_ID:
        raise StructuralError(
            f"terminal sentinel missing: last index id is {terminal_id}, expected 0",
            {"resource_id": terminal_id},
        )

    entries: List[IndexRecord] = []
    seen = set()
    for position, (resource_id, offset) in enumerate(raw[:-1]):
        if resource_id == TERMINAL_ID:
            raise StructuralError(
                f"index entry {position} uses reserved resource id 0",
                {"position": position},
            )
        if resource_id in seen:
            raise StructuralError(
                f"duplicate resource id={resource_id} in index",
                {"resource_id": resource_id, "position": position},
            )
        seen.add(resource_id)
        entries.append(IndexEntry(resource_id=resource_id, offset=offset))
    entries.append(TerminalEntry(offset=terminal_offset))

    expected_start = data_start(header.resource_count)
    first_offset = entries[0].offset
    if first_offset != expected_start:
        if strict:
            raise StructuralError(
                f"first offset {first_offset} does not match end of index {expected_start}",
                {"offset": first_offset, "expected": expected_start},
            )
        logger.warning(
            "first offset %d does not match end of index %d; using relative lengths",
            first_offset,
            expected_start,
        )

    return header, tuple(entries)


def decode(
    stream: BinaryIO,
    *,
    limits: Optional[ResourceBudget] = None,
    strict_offsets: Optional[bool] = None,
) -> ResourceTable:
    """Decode a complete archive from *stream*.

    Payload lengths come from the difference between consecutive offsets,
    computed modulo 2**32 like the on-disk field. A wrapped or oversized
    length surfaces as a :class:`TruncationError` once the stream runs dry.
    """

    settings = get_settings()
    budget = limits if limits is not None else ResourceBudget.from_settings(settings)
    header, index = read_index(stream, limits=budget, strict_offsets=strict_offsets)

    resources: Dict[int, bytes] = {}
    total = 0
    for current, following in zip(index, index[1:]):
        length = (following.offset - current.offset) & MAX_OFFSET
        budget.ensure_resource_bytes(current.resource_id, length)
        payload = _read_payload(stream, current.resource_id, length, settings.read_chunk_size)
        total += length
        budget.ensure_total_bytes(total)
        resources[current.resource_id] = payload

    table = ResourceTable(
        version=header.version, encoding=header.encoding, resources=resources
    )
    logger.debug(
        "decoded pak version=%d encoding=%d resources=%d payload_bytes=%d",
        header.version,
        int(header.encoding),
        len(resources),
        total,
    )
    return table


def decode_bytes(
    data: bytes,
    *,
    limits: Optional[ResourceBudget] = None,
    strict_offsets: Optional[bool] = None,
) -> ResourceTable:
    """Decode an archive held in memory."""

    stream = io.BytesIO(data)
    table = decode(stream, limits=limits, strict_offsets=strict_offsets)
    trailing = len(data) - stream.tell()
    if trailing:
        logger.debug("ignoring %d trailing bytes after last resource", trailing)
    return table


def read_file(
    path: PathLike,
    *,
    limits: Optional[ResourceBudget] = None,
    strict_offsets: Optional[bool] = None,
) -> ResourceTable:
    """Decode the archive stored at *path*."""

    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise PakIOError(f"cannot open {os.fspath(path)}: {exc}", {"path": os.fspath(path)}) from exc
    with handle:
        return decode(handle, limits=limits, strict_offsets=strict_offsets)


__all__ = [
    "PakHeader",
    "read_header",
    "read_index",
    "decode",
    "decode_bytes",
    "read_file",
]
