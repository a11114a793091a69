"""Serialise :class:`ResourceTable` instances into the canonical .pak layout."""

from __future__ import annotations

import os
import stat
import tempfile
from typing import BinaryIO, List, Optional, Tuple, Union

from .errors import PakIOError, PakValueError, PreconditionError
from .format import HEADER_STRUCT, INDEX_ENTRY_STRUCT, MAX_OFFSET, data_start
from .logging_config import get_logger
from .model import (
    IndexEntry,
    IndexRecord,
    ResourceTable,
    TerminalEntry,
    validate_encoding,
    validate_payload,
    validate_resource_id,
    validate_version,
)

logger = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _require_table(table: Optional[ResourceTable]) -> ResourceTable:
    if table is None:
        raise PreconditionError("cannot encode pak: table is None")
    return table


def build_index(table: ResourceTable) -> Tuple[IndexRecord, ...]:
    """Compute the index entries for *table* in ascending identifier order."""

    table = _require_table(table)
    ids = sorted(table.resources)
    offset = data_start(len(ids))
    entries: List[IndexRecord] = []
    for resource_id in ids:
        validate_resource_id(resource_id)
        entries.append(IndexEntry(resource_id=resource_id, offset=offset))
        offset += len(validate_payload(resource_id, table.resources[resource_id]))
        if offset > MAX_OFFSET:
            raise PakValueError(
                f"resource id={resource_id} ends at offset {offset}, beyond the 32-bit offset range",
                {"resource_id": resource_id, "offset": offset},
            )
    entries.append(TerminalEntry(offset=offset))
    return tuple(entries)


def encode(table: Optional[ResourceTable]) -> bytes:
    """Return the canonical byte representation of *table*.

    Resources are laid out in ascending identifier order, so equal tables
    always encode to identical bytes whatever order they were built in.
    """

    table = _require_table(table)
    version = validate_version(table.version)
    encoding = validate_encoding(table.encoding)
    index = build_index(table)

    parts = [HEADER_STRUCT.pack(version, len(table.resources), encoding)]
    parts.extend(INDEX_ENTRY_STRUCT.pack(entry.resource_id, entry.offset) for entry in index)
    for entry in index[:-1]:
        parts.append(validate_payload(entry.resource_id, table.resources[entry.resource_id]))
    blob = b"".join(parts)
    logger.debug(
        "encoded pak version=%d encoding=%d resources=%d size=%d",
        version,
        int(encoding),
        len(table.resources),
        len(blob),
    )
    return blob


def _write_all(stream: BinaryIO, blob: bytes) -> int:
    view = memoryview(blob)
    written = 0
    while written < len(blob):
        try:
            count = stream.write(view[written:])
        except OSError as exc:
            raise PakIOError(f"stream write failed: {exc}", {"written": written}) from exc
        if not count:
            raise PakIOError(
                f"short write: {written} of {len(blob)} bytes written",
                {"written": written, "expected": len(blob)},
            )
        written += count
    return written


def write(stream: BinaryIO, table: Optional[ResourceTable]) -> int:
    """Write the encoded *table* to *stream* and return the number of bytes written."""

    return _write_all(stream, encode(table))


def _published_mode(destination: str) -> int:
    """Mode for a freshly published archive: keep an existing file's, else 0666 minus umask."""

    try:
        return stat.S_IMODE(os.stat(destination).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_file(path: PathLike, table: Optional[ResourceTable]) -> int:
    """Atomically write *table* to *path*.

    The archive is written to a temporary file in the destination directory
    and moved into place with :func:`os.replace` only after every byte was
    written, so a failure never leaves a partial archive at *path*.
    """

    blob = encode(table)
    destination = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(destination))
    try:
        fd, tmp = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=directory)
    except OSError as exc:
        raise PakIOError(f"cannot create temporary file for {destination}: {exc}", {"path": destination}) from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            written = _write_all(handle, blob)
        os.chmod(tmp, _published_mode(destination))
        os.replace(tmp, destination)
    except OSError as exc:
        os.unlink(tmp)
        raise PakIOError(f"cannot write {destination}: {exc}", {"path": destination}) from exc
    except BaseException:
        os.unlink(tmp)
        raise
    logger.debug("wrote %d bytes to %s", written, destination)
    return written


__all__ = ["build_index", "encode", "write", "write_file"]
