from dataclasses import fields
from typing import Dict, Iterable, Type, TypeVar

from openserum.utils.cursor import U128_SIZE_BYTES

T = TypeVar("T")

SLOT_COUNT = U128_SIZE_BYTES * 8


def unpack_flags(value: int, names: Iterable[str]) -> Dict[str, bool]:
    """Bit ``i`` of ``value`` becomes the flag named ``names[i]``. Unnamed high bits are ignored."""
    return {name: (value >> i) & 1 == 1 for i, name in enumerate(names)}


def flags_from_int(cls: Type[T], value: int) -> T:
    """Builds a boolean dataclass whose field order matches the bit order."""
    return cls(**unpack_flags(value, [f.name for f in fields(cls)]))


def bit_at(mask: bytes, index: int) -> bool:
    """Bit ``index`` of a 128 bit little-endian mask: bit ``index % 8`` of byte ``index // 8``."""
    if len(mask) != U128_SIZE_BYTES:
        raise ValueError(f"Expected a {U128_SIZE_BYTES} byte mask, got {len(mask)} bytes")
    if not 0 <= index < SLOT_COUNT:
        raise ValueError(f"Slot index out of bound: {index}")
    return (mask[index // 8] >> (index % 8)) & 1 == 1
