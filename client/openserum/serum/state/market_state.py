import logging
from dataclasses import dataclass, fields

from construct import Int64ul, Padding, Struct
from solders.pubkey import Pubkey

from openserum.utils.cursor import require_span
from openserum.utils.layouts import PUBLIC_KEY_LAYOUT

from .base import ACCOUNT_FLAGS_LAYOUT, SERUM_MAGIC, AccountFlags, validate_serum_data

logger = logging.getLogger(__name__)

# version 2 market, followed on chain by a 7 byte "padding" blob
MARKET_LAYOUT = Struct(
    Padding(len(SERUM_MAGIC)),
    "account_flags" / ACCOUNT_FLAGS_LAYOUT,
    "own_address" / PUBLIC_KEY_LAYOUT,
    "vault_signer_nonce" / Int64ul,
    "base_mint" / PUBLIC_KEY_LAYOUT,
    "quote_mint" / PUBLIC_KEY_LAYOUT,
    "base_vault" / PUBLIC_KEY_LAYOUT,
    "base_deposits_total" / Int64ul,
    "base_fees_accrued" / Int64ul,
    "quote_vault" / PUBLIC_KEY_LAYOUT,
    "quote_deposits_total" / Int64ul,
    "quote_fees_accrued" / Int64ul,
    "quote_dust_threshold" / Int64ul,
    "request_queue" / PUBLIC_KEY_LAYOUT,
    "event_queue" / PUBLIC_KEY_LAYOUT,
    "bids" / PUBLIC_KEY_LAYOUT,
    "asks" / PUBLIC_KEY_LAYOUT,
    "base_lot_size" / Int64ul,
    "quote_lot_size" / Int64ul,
    "fee_rate_bps" / Int64ul,
    "referrer_rebates_accrued" / Int64ul,
)

MARKET_MIN_SPAN = MARKET_LAYOUT.sizeof()
MARKET_ACCOUNT_SIZE = MARKET_MIN_SPAN + 7


@dataclass(frozen=True)
class Market:
    account_flags: AccountFlags
    own_address: Pubkey
    vault_signer_nonce: int
    base_mint: Pubkey
    quote_mint: Pubkey
    base_vault: Pubkey
    base_deposits_total: int
    base_fees_accrued: int
    quote_vault: Pubkey
    quote_deposits_total: int
    quote_fees_accrued: int
    quote_dust_threshold: int
    request_queue: Pubkey
    event_queue: Pubkey
    bids: Pubkey
    asks: Pubkey
    base_lot_size: int
    quote_lot_size: int
    fee_rate_bps: int
    referrer_rebates_accrued: int

    @classmethod
    def from_bytes(cls, data) -> "Market":
        validate_serum_data(data)
        require_span(data, MARKET_MIN_SPAN, "Market")
        parsed = MARKET_LAYOUT.parse(bytes(data[:MARKET_MIN_SPAN]))
        logger.debug("decoded market %s", parsed.own_address)
        return cls(**{f.name: parsed[f.name] for f in fields(cls)})
