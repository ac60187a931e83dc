"""
Bounds checked little-endian access to account buffers.

Readers never mutate the buffer. Writers mutate a caller owned ``bytearray``
(or writable ``memoryview``) in place.
"""
import struct

from solders.pubkey import Pubkey

from openserum.utils.errors import BoundsError, FieldRangeError, LayoutSizeError

U8_SIZE_BYTES = 1
U16_SIZE_BYTES = 2
U32_SIZE_BYTES = 4
U64_SIZE_BYTES = 8
U128_SIZE_BYTES = 16

U16_MAX = (1 << 16) - 1
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
I64_MIN = -(1 << 63)

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_I64 = struct.Struct("<q")


def check_bounds(data, offset: int, width: int):
    if offset < 0 or width < 0 or offset + width > len(data):
        raise BoundsError(offset, width, len(data))


def check_range(value: int, low: int, high: int, name: str):
    if not low <= value <= high:
        raise FieldRangeError(name, value, low, high)


def require_span(data, span: int, what: str):
    if len(data) < span:
        raise LayoutSizeError(
            f"{what} requires at least {span} bytes, got {len(data)}"
        )


def read_u8(data, offset: int) -> int:
    check_bounds(data, offset, U8_SIZE_BYTES)
    return data[offset]


def read_u16(data, offset: int) -> int:
    check_bounds(data, offset, U16_SIZE_BYTES)
    return _U16.unpack_from(data, offset)[0]


def read_u32(data, offset: int) -> int:
    check_bounds(data, offset, U32_SIZE_BYTES)
    return _U32.unpack_from(data, offset)[0]


def read_u64(data, offset: int) -> int:
    check_bounds(data, offset, U64_SIZE_BYTES)
    return _U64.unpack_from(data, offset)[0]


def read_i64(data, offset: int) -> int:
    check_bounds(data, offset, U64_SIZE_BYTES)
    return _I64.unpack_from(data, offset)[0]


def read_u128(data, offset: int) -> int:
    return int.from_bytes(read_fixed_bytes(data, offset, U128_SIZE_BYTES), byteorder="little")


def read_fixed_bytes(data, offset: int, length: int) -> bytes:
    check_bounds(data, offset, length)
    return bytes(data[offset:offset + length])


def read_public_key(data, offset: int) -> Pubkey:
    return Pubkey(read_fixed_bytes(data, offset, Pubkey.LENGTH))


def write_u16(buffer, offset: int, value: int, name: str = "u16"):
    check_bounds(buffer, offset, U16_SIZE_BYTES)
    check_range(value, 0, U16_MAX, name)
    _U16.pack_into(buffer, offset, value)


def write_u32(buffer, offset: int, value: int, name: str = "u32"):
    check_bounds(buffer, offset, U32_SIZE_BYTES)
    check_range(value, 0, U32_MAX, name)
    _U32.pack_into(buffer, offset, value)


def write_u64(buffer, offset: int, value: int, name: str = "u64"):
    check_bounds(buffer, offset, U64_SIZE_BYTES)
    check_range(value, 0, U64_MAX, name)
    _U64.pack_into(buffer, offset, value)


def write_fixed_bytes(buffer, offset: int, value: bytes):
    check_bounds(buffer, offset, len(value))
    buffer[offset:offset + len(value)] = value
