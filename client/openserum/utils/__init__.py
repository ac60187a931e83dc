from .errors import BoundsError, FieldRangeError, LayoutError, LayoutSizeError, MagicMismatchError
from .fixed_point import U64F64

__all__ = [
    "BoundsError",
    "FieldRangeError",
    "LayoutError",
    "LayoutSizeError",
    "MagicMismatchError",
    "U64F64",
]
