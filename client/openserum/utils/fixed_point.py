from dataclasses import dataclass

from openserum.utils.cursor import U64_SIZE_BYTES, U128_SIZE_BYTES, read_fixed_bytes

FRACTION_BITS = 64
FRACTION_MASK = (1 << FRACTION_BITS) - 1
U128_MAX = (1 << 128) - 1


@dataclass(frozen=True)
class U64F64:
    """Unsigned 64.64 fixed point number.

    Stored on chain as 16 little-endian bytes: the low-order 8 bytes hold the
    fractional part (denominator 2**64), the high-order 8 bytes the integer part.
    """

    raw: int

    LENGTH = U128_SIZE_BYTES

    def __post_init__(self):
        if not 0 <= self.raw <= U128_MAX:
            raise ValueError(f"U64F64 raw value out of range: {self.raw}")

    @classmethod
    def from_parts(cls, high: int, low: int) -> "U64F64":
        return cls((high << FRACTION_BITS) | low)

    @classmethod
    def from_bytes(cls, raw: bytes, offset: int = 0) -> "U64F64":
        chunk = read_fixed_bytes(raw, offset, cls.LENGTH)
        low = int.from_bytes(chunk[:U64_SIZE_BYTES], byteorder="little")
        high = int.from_bytes(chunk[U64_SIZE_BYTES:], byteorder="little")
        return cls.from_parts(high, low)

    def to_bytes(self) -> bytes:
        return self.raw.to_bytes(self.LENGTH, byteorder="little")

    @property
    def high(self) -> int:
        return self.raw >> FRACTION_BITS

    @property
    def low(self) -> int:
        return self.raw & FRACTION_MASK

    def to_approximate_float(self) -> float:
        # lossy once the value needs more than 53 bits of mantissa
        return self.high + self.low / (1 << FRACTION_BITS)

    def __float__(self) -> float:
        return self.to_approximate_float()

    def __repr__(self):
        return f"U64F64({self.to_approximate_float()})"
