from .state import MangoGroup, MangoGroupAccountFlags, MangoIndex

__all__ = [
    "MangoGroup",
    "MangoGroupAccountFlags",
    "MangoIndex",
]
