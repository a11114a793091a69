import struct

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings, strategies as st  # type: ignore

from chromepak.decoder import decode_bytes
from chromepak.encoder import encode
from chromepak.errors import PakFormatError, TruncationError
from chromepak.model import Encoding, ResourceTable

pytestmark = pytest.mark.property

resource_maps = st.dictionaries(
    st.integers(min_value=1, max_value=0xFFFF),
    st.binary(max_size=64),
    max_size=24,
)
versions = st.integers(min_value=0, max_value=0xFFFFFFFF)
encodings = st.sampled_from(list(Encoding))


@given(versions, encodings, resource_maps)
@settings(max_examples=200)
def test_decode_inverts_encode(version: int, encoding: Encoding, resources) -> None:
    table = ResourceTable(version=version, encoding=encoding, resources=resources)
    assert decode_bytes(encode(table), strict_offsets=True) == table


@given(versions, resource_maps)
@settings(max_examples=100)
def test_insertion_order_does_not_change_bytes(version: int, resources) -> None:
    forward = ResourceTable(version=version, resources=resources)
    backward = ResourceTable(version=version, resources=dict(reversed(list(resources.items()))))
    assert encode(forward) == encode(backward)


@given(resource_maps)
@settings(max_examples=100)
def test_index_is_sorted_and_contiguous(resources) -> None:
    blob = encode(ResourceTable(resources=resources))
    count = len(resources)
    entries = [struct.unpack_from("<HI", blob, 9 + 6 * position) for position in range(count + 1)]
    ids = [resource_id for resource_id, _ in entries[:-1]]
    assert ids == sorted(resources)
    assert entries[-1] == (0, len(blob))
    for (resource_id, start), (_, end) in zip(entries, entries[1:]):
        assert blob[start:end] == resources[resource_id]


@given(versions, st.dictionaries(st.integers(1, 0xFFFF), st.binary(min_size=1, max_size=32), min_size=1, max_size=8), st.data())
@settings(max_examples=100)
def test_any_cut_inside_payload_is_truncation(version: int, resources, data) -> None:
    blob = encode(ResourceTable(version=version, resources=resources))
    start = 9 + 6 * (len(resources) + 1)
    cut = data.draw(st.integers(min_value=start, max_value=len(blob) - 1))
    with pytest.raises(TruncationError) as excinfo:
        decode_bytes(blob[:cut])
    assert excinfo.value.resource_id in resources


@given(st.binary(max_size=256))
@settings(max_examples=200)
def test_arbitrary_bytes_decode_or_raise_format_error(data: bytes) -> None:
    try:
        table = decode_bytes(data)
    except PakFormatError:
        return
    assert isinstance(table, ResourceTable)
