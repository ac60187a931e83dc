class LayoutError(ValueError):
    """Raised when account bytes do not match the expected binary layout."""


class BoundsError(LayoutError):
    def __init__(self, offset: int, width: int, length: int):
        super().__init__(
            f"Access of {width} bytes at offset {offset} exceeds buffer of {length} bytes"
        )
        self.offset = offset
        self.width = width
        self.length = length


class MagicMismatchError(LayoutError):
    def __init__(self, found: bytes):
        super().__init__(f"Invalid serum account data. Expected b'serum' prefix, found {found!r}")
        self.found = found


class LayoutSizeError(LayoutError):
    pass


class FieldRangeError(LayoutError):
    def __init__(self, name: str, value: int, low: int, high: int):
        super().__init__(f"{name} must be within [{low}, {high}], got {value}")
        self.name = name
        self.value = value
