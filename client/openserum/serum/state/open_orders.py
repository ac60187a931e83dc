import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd
from construct import Bytes, Int64ul, Padding, Struct
from solders.pubkey import Pubkey

from openserum.serum.market_math import price_lots_to_number
from openserum.utils.bits import SLOT_COUNT, bit_at
from openserum.utils.cursor import (
    U64_SIZE_BYTES,
    U128_SIZE_BYTES,
    read_fixed_bytes,
    read_u64,
    read_u128,
    require_span,
)
from openserum.utils.layouts import PUBLIC_KEY_LAYOUT

from .base import ACCOUNT_FLAGS_LAYOUT, ACCOUNT_FLAGS_OFFSET, ACCOUNT_FLAGS_SIZE_BYTES, AccountFlags

logger = logging.getLogger(__name__)

OPEN_ORDERS_HEADER_LAYOUT = Struct(
    Padding(ACCOUNT_FLAGS_OFFSET),
    "account_flags" / ACCOUNT_FLAGS_LAYOUT,
    "market" / PUBLIC_KEY_LAYOUT,
    "owner" / PUBLIC_KEY_LAYOUT,
    "base_token_free" / Int64ul,  # unsettled balance
    "base_token_total" / Int64ul,
    "quote_token_free" / Int64ul,
    "quote_token_total" / Int64ul,
    "free_slot_bits" / Bytes(U128_SIZE_BYTES),
    "is_bid_bits" / Bytes(U128_SIZE_BYTES),
)

MARKET_FILTER_OFFSET = ACCOUNT_FLAGS_OFFSET + ACCOUNT_FLAGS_SIZE_BYTES
OWNER_FILTER_OFFSET = MARKET_FILTER_OFFSET + Pubkey.LENGTH

ORDERS_OFFSET = OPEN_ORDERS_HEADER_LAYOUT.sizeof()
ORDERS_SIZE = SLOT_COUNT * U128_SIZE_BYTES
CLIENT_IDS_OFFSET = ORDERS_OFFSET + ORDERS_SIZE
CLIENT_IDS_SIZE = SLOT_COUNT * U64_SIZE_BYTES
REFERRER_REBATES_ACCRUED_OFFSET = CLIENT_IDS_OFFSET + CLIENT_IDS_SIZE
OPEN_ORDERS_MIN_SPAN = REFERRER_REBATES_ACCRUED_OFFSET + U64_SIZE_BYTES
OPEN_ORDERS_ACCOUNT_SIZE = OPEN_ORDERS_MIN_SPAN + 7


@dataclass(frozen=True)
class OpenOrder:
    slot: int
    is_bid: bool
    client_order_id: bytes
    price: int
    client_id: int
    order_id: int

    def float_price(self, base_decimals: int, quote_decimals: int, base_lot_size: int, quote_lot_size: int) -> float:
        return price_lots_to_number(self.price, base_decimals, quote_decimals, base_lot_size, quote_lot_size)


@dataclass(frozen=True)
class OrderSlots:
    """Per slot view of the 128 order slots, plus the live orders in slot order."""

    orders: Tuple[OpenOrder, ...]
    prices: Tuple[int, ...]
    client_ids: Tuple[int, ...]
    client_order_ids: Tuple[bytes, ...]
    order_ids: Tuple[int, ...]
    free_slots: Tuple[bool, ...]
    bid_slots: Tuple[bool, ...]


def decode_order_slots(free_slot_bits: bytes, is_bid_bits: bytes, orders: bytes, client_ids: bytes) -> OrderSlots:
    require_span(orders, ORDERS_SIZE, "Open orders slots")
    require_span(client_ids, CLIENT_IDS_SIZE, "Open orders client ids")

    live_orders = []
    prices, ids, client_order_ids, order_ids, free_slots, bid_slots = [], [], [], [], [], []
    for i in range(SLOT_COUNT):
        slot_offset = i * U128_SIZE_BYTES
        client_id = read_u64(client_ids, i * U64_SIZE_BYTES)
        client_order_id = read_fixed_bytes(orders, slot_offset, U64_SIZE_BYTES)
        price = read_u64(orders, slot_offset + U64_SIZE_BYTES)
        order_id = read_u128(orders, slot_offset)
        is_free = bit_at(free_slot_bits, i)
        is_bid = bit_at(is_bid_bits, i)

        prices.append(price)
        ids.append(client_id)
        client_order_ids.append(client_order_id)
        order_ids.append(order_id)
        free_slots.append(is_free)
        bid_slots.append(is_bid)

        if not is_free:
            live_orders.append(
                OpenOrder(
                    slot=i,
                    is_bid=is_bid,
                    client_order_id=client_order_id,
                    price=price,
                    client_id=client_id,
                    order_id=order_id,
                )
            )

    return OrderSlots(
        orders=tuple(live_orders),
        prices=tuple(prices),
        client_ids=tuple(ids),
        client_order_ids=tuple(client_order_ids),
        order_ids=tuple(order_ids),
        free_slots=tuple(free_slots),
        bid_slots=tuple(bid_slots),
    )


@dataclass(frozen=True)
class OpenOrdersAccount:
    account_flags: AccountFlags
    market: Pubkey
    owner: Pubkey
    base_token_free: int
    base_token_total: int
    quote_token_free: int
    quote_token_total: int
    free_slot_bits: bytes = field(repr=False)
    is_bid_bits: bytes = field(repr=False)
    referrer_rebates_accrued: int
    slots: OrderSlots = field(repr=False)

    @property
    def orders(self) -> Tuple[OpenOrder, ...]:
        return self.slots.orders

    @classmethod
    def from_bytes(cls, data) -> "OpenOrdersAccount":
        require_span(data, OPEN_ORDERS_MIN_SPAN, "Open orders account")
        header = OPEN_ORDERS_HEADER_LAYOUT.parse(read_fixed_bytes(data, 0, ORDERS_OFFSET))
        slots = decode_order_slots(
            header.free_slot_bits,
            header.is_bid_bits,
            read_fixed_bytes(data, ORDERS_OFFSET, ORDERS_SIZE),
            read_fixed_bytes(data, CLIENT_IDS_OFFSET, CLIENT_IDS_SIZE),
        )
        logger.debug("decoded open orders account for %s: %d live orders", header.owner, len(slots.orders))
        return cls(
            account_flags=header.account_flags,
            market=header.market,
            owner=header.owner,
            base_token_free=header.base_token_free,
            base_token_total=header.base_token_total,
            quote_token_free=header.quote_token_free,
            quote_token_total=header.quote_token_total,
            free_slot_bits=header.free_slot_bits,
            is_bid_bits=header.is_bid_bits,
            referrer_rebates_accrued=read_u64(data, REFERRER_REBATES_ACCRUED_OFFSET),
            slots=slots,
        )

    def to_dataframe(
        self,
        base_decimals: Optional[int] = None,
        quote_decimals: Optional[int] = None,
        base_lot_size: Optional[int] = None,
        quote_lot_size: Optional[int] = None,
    ) -> pd.DataFrame:
        df = pd.DataFrame(
            [(o.slot, "bid" if o.is_bid else "ask", o.price, o.client_id, o.order_id) for o in self.orders],
            columns=["slot", "side", "price", "client_id", "order_id"],
        )
        market_params = (base_decimals, quote_decimals, base_lot_size, quote_lot_size)
        if all(p is not None for p in market_params):
            df["float_price"] = [o.float_price(*market_params) for o in self.orders]
        return df


def open_orders_filters(market: Pubkey, owner: Pubkey) -> List[dict]:
    """getProgramAccounts filters selecting ``owner``'s open orders account on ``market``."""
    return [
        {"dataSize": OPEN_ORDERS_ACCOUNT_SIZE},
        {"memcmp": {"offset": MARKET_FILTER_OFFSET, "bytes": str(market)}},
        {"memcmp": {"offset": OWNER_FILTER_OFFSET, "bytes": str(owner)}},
    ]
