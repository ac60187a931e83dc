import logging
from dataclasses import dataclass
from typing import Tuple

from construct import Array, Int8ul, Int64ul, Padding, Struct
from solders.pubkey import Pubkey

from openserum.utils.cursor import U64_SIZE_BYTES, require_span
from openserum.utils.fixed_point import U64F64
from openserum.utils.layouts import PUBLIC_KEY_LAYOUT, U64F64_LAYOUT, FlagsAdapter

logger = logging.getLogger(__name__)

NUM_TOKENS = 5
NUM_MARKETS = NUM_TOKENS - 1


@dataclass(frozen=True)
class MangoGroupAccountFlags:
    initialized: bool = False
    mango_group: bool = False
    margin_account: bool = False
    mango_srm_account: bool = False


@dataclass(frozen=True)
class MangoIndex:
    last_update: int
    borrow: U64F64
    deposit: U64F64


INDEX_LAYOUT = Struct(
    "last_update" / Int64ul,
    "borrow" / U64F64_LAYOUT,
    "deposit" / U64F64_LAYOUT,
)

# groups only store 4 booleans, the rest of the 8 byte flags word is unused
MANGO_GROUP_LAYOUT = Struct(
    "account_flags" / FlagsAdapter(Int8ul, MangoGroupAccountFlags),
    Padding(U64_SIZE_BYTES - 1),
    "tokens" / Array(NUM_TOKENS, PUBLIC_KEY_LAYOUT),
    "vaults" / Array(NUM_TOKENS, PUBLIC_KEY_LAYOUT),
    "indexes" / Array(NUM_TOKENS, INDEX_LAYOUT),
    "spot_markets" / Array(NUM_MARKETS, PUBLIC_KEY_LAYOUT),
    "oracles" / Array(NUM_MARKETS, PUBLIC_KEY_LAYOUT),
    "signer_nonce" / Int64ul,
    "signer_key" / PUBLIC_KEY_LAYOUT,
    "dex_program_id" / PUBLIC_KEY_LAYOUT,
    "total_deposits" / Array(NUM_TOKENS, U64F64_LAYOUT),
    "total_borrows" / Array(NUM_TOKENS, U64F64_LAYOUT),
)

MANGO_GROUP_MIN_SPAN = MANGO_GROUP_LAYOUT.sizeof()


@dataclass(frozen=True)
class MangoGroup:
    account_flags: MangoGroupAccountFlags
    tokens: Tuple[Pubkey, ...]
    vaults: Tuple[Pubkey, ...]
    indexes: Tuple[MangoIndex, ...]
    spot_markets: Tuple[Pubkey, ...]
    oracles: Tuple[Pubkey, ...]
    signer_nonce: int
    signer_key: Pubkey
    dex_program_id: Pubkey
    total_deposits: Tuple[U64F64, ...]
    total_borrows: Tuple[U64F64, ...]

    @classmethod
    def from_bytes(cls, data) -> "MangoGroup":
        require_span(data, MANGO_GROUP_MIN_SPAN, "Mango group")
        parsed = MANGO_GROUP_LAYOUT.parse(bytes(data[:MANGO_GROUP_MIN_SPAN]))
        logger.debug("decoded mango group, dex program %s", parsed.dex_program_id)
        return cls(
            account_flags=parsed.account_flags,
            tokens=tuple(parsed.tokens),
            vaults=tuple(parsed.vaults),
            indexes=tuple(
                MangoIndex(last_update=i.last_update, borrow=i.borrow, deposit=i.deposit)
                for i in parsed.indexes
            ),
            spot_markets=tuple(parsed.spot_markets),
            oracles=tuple(parsed.oracles),
            signer_nonce=parsed.signer_nonce,
            signer_key=parsed.signer_key,
            dex_program_id=parsed.dex_program_id,
            total_deposits=tuple(parsed.total_deposits),
            total_borrows=tuple(parsed.total_borrows),
        )
