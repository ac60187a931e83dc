from construct import Adapter, Bytes
from solders.pubkey import Pubkey

from openserum.utils.bits import flags_from_int
from openserum.utils.fixed_point import U64F64


class PubkeyAdapter(Adapter):
    def __init__(self):
        super().__init__(Bytes(Pubkey.LENGTH))

    def _decode(self, obj, context, path) -> Pubkey:
        return Pubkey(obj)


class U64F64Adapter(Adapter):
    def __init__(self):
        super().__init__(Bytes(U64F64.LENGTH))

    def _decode(self, obj, context, path) -> U64F64:
        return U64F64.from_bytes(obj)


class FlagsAdapter(Adapter):
    """Maps the low bits of an integer field onto a dataclass of booleans."""

    def __init__(self, subcon, flags_cls):
        super().__init__(subcon)
        self.flags_cls = flags_cls

    def _decode(self, obj, context, path):
        return flags_from_int(self.flags_cls, obj)


PUBLIC_KEY_LAYOUT = PubkeyAdapter()
U64F64_LAYOUT = U64F64Adapter()
