from __future__ import annotations

import pytest

from openserum.utils.cursor import (
    read_fixed_bytes,
    read_i64,
    read_public_key,
    read_u8,
    read_u16,
    read_u32,
    read_u64,
    read_u128,
    require_span,
    write_fixed_bytes,
    write_u16,
    write_u32,
    write_u64,
)
from openserum.utils.errors import BoundsError, FieldRangeError, LayoutSizeError

from conftest import key


def test_reads_are_little_endian():
    data = bytes(range(1, 17))
    assert read_u8(data, 0) == 1
    assert read_u16(data, 1) == 0x0302
    assert read_u32(data, 0) == 0x04030201
    assert read_u64(data, 8) == 0x100F0E0D0C0B0A09
    assert read_u128(data, 0) == int.from_bytes(data, "little")


def test_read_i64_is_signed():
    assert read_i64(b"\xff" * 8, 0) == -1
    assert read_u64(b"\xff" * 8, 0) == 2 ** 64 - 1


def test_read_past_end_raises():
    with pytest.raises(BoundsError):
        read_u64(bytes(12), 5)
    with pytest.raises(BoundsError):
        read_fixed_bytes(bytes(4), 2, 3)
    with pytest.raises(BoundsError):
        read_u32(bytes(8), -1)


def test_read_public_key():
    data = bytes(3) + bytes(key(9)) + bytes(3)
    assert read_public_key(data, 3) == key(9)
    with pytest.raises(BoundsError):
        read_public_key(data, 7)


def test_writers_mutate_in_place():
    buffer = bytearray(16)
    write_u64(buffer, 1, 0x0102030405060708)
    write_u32(buffer, 9, 0xFFFFFFFE)
    write_u16(buffer, 13, 65535)
    write_fixed_bytes(buffer, 15, b"\x7f")
    assert buffer[1:9] == bytes([8, 7, 6, 5, 4, 3, 2, 1])
    assert buffer[9:13] == b"\xfe\xff\xff\xff"
    assert buffer[13:15] == b"\xff\xff"
    assert buffer[15] == 0x7F


def test_write_overrun_leaves_buffer_untouched():
    buffer = bytearray(10)
    with pytest.raises(BoundsError):
        write_u64(buffer, 3, 2 ** 64 - 1)
    assert buffer == bytearray(10)


def test_require_span():
    require_span(bytes(10), 10, "thing")
    with pytest.raises(LayoutSizeError):
        require_span(bytes(9), 10, "thing")


@pytest.mark.parametrize(
    "writer, value",
    [(write_u16, 1 << 16), (write_u32, -1), (write_u64, 1 << 64), (write_u64, -1)],
)
def test_write_out_of_range_value(writer, value):
    buffer = bytearray(8)
    with pytest.raises(FieldRangeError):
        writer(buffer, 0, value)
    assert buffer == bytearray(8)


def test_range_error_names_the_field():
    with pytest.raises(FieldRangeError, match="limit_price"):
        write_u64(bytearray(8), 0, -5, "limit_price")
