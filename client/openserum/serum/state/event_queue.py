import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

import numpy as np
import pandas as pd
from construct import Bytes, Int8ul, Int32ul, Int64ul, Padding, Struct
from solders.pubkey import Pubkey

from openserum.utils.cursor import read_fixed_bytes, read_u8, read_u64, require_span
from openserum.utils.errors import LayoutSizeError
from openserum.utils.layouts import PUBLIC_KEY_LAYOUT, FlagsAdapter

from .base import (
    ACCOUNT_FLAGS_LAYOUT,
    SERUM_MAGIC,
    SERUM_TAIL,
    AccountFlags,
    Side,
    validate_serum_data,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventFlags:
    fill: bool = False
    out: bool = False
    bid: bool = False
    maker: bool = False

    @property
    def side(self) -> Side:
        return Side.BID if self.bid else Side.ASK


EVENT_QUEUE_HEADER_LAYOUT = Struct(
    Padding(len(SERUM_MAGIC)),
    "account_flags" / ACCOUNT_FLAGS_LAYOUT,
    "head" / Int32ul,
    Padding(4),
    "count" / Int32ul,
    Padding(4),
    "seq_num" / Int32ul,
    Padding(4),
)

EVENT_LAYOUT = Struct(
    "event_flags" / FlagsAdapter(Int8ul, EventFlags),
    "open_orders_slot" / Int8ul,
    "fee_tier" / Int8ul,
    Padding(5),
    "native_quantity_released" / Int64ul,  # amount the user received
    "native_quantity_paid" / Int64ul,  # amount the user paid
    "native_fee_or_rebate" / Int64ul,
    "order_id" / Bytes(16),
    "open_orders" / PUBLIC_KEY_LAYOUT,
    "client_order_id" / Int64ul,
)

HEADER_LAYOUT_SPAN = EVENT_QUEUE_HEADER_LAYOUT.sizeof()
NODE_LAYOUT_SPAN = EVENT_LAYOUT.sizeof()

FILL_FLAG = 1
NATIVE_QUANTITY_PAID_OFFSET = 16


@dataclass(frozen=True)
class TradeEvent:
    open_orders: Pubkey
    native_quantity_paid: int
    native_quantity_released: int
    native_fee_or_rebate: int
    order_id: bytes = field(repr=False)
    event_flags: EventFlags
    open_orders_slot: int
    fee_tier: int
    client_order_id: int
    float_price: float
    float_quantity: float

    @property
    def side(self) -> Side:
        return self.event_flags.side


def ring_indices(head: int, count: int, alloc_len: int) -> Iterator[int]:
    """Visits every slot of the ring once, newest live entry first.

    The live region is ``count`` slots starting at ``head``; the remaining
    ``alloc_len - count`` slots follow, oldest garbage last.
    """
    for i in range(alloc_len):
        yield (head + count + alloc_len - 1 - i) % alloc_len


def fill_price_and_quantity(
    event_flags: EventFlags,
    native_quantity_paid: int,
    native_quantity_released: int,
    native_fee_or_rebate: int,
    base_decimals: int,
    quote_decimals: int,
) -> Tuple[float, float]:
    """Human scale price and base quantity of a fill, rounded to single precision."""
    base_multiplier = 10.0 ** base_decimals
    quote_multiplier = 10.0 ** quote_decimals

    if event_flags.bid:
        if event_flags.maker:
            price_before_fees = native_quantity_paid + native_fee_or_rebate
        else:
            price_before_fees = native_quantity_paid - native_fee_or_rebate
        base_quantity = native_quantity_released
    else:
        if event_flags.maker:
            price_before_fees = native_quantity_released - native_fee_or_rebate
        else:
            price_before_fees = native_quantity_released + native_fee_or_rebate
        base_quantity = native_quantity_paid

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        top = np.float64(price_before_fees) * base_multiplier
        bottom = np.float64(quote_multiplier) * base_quantity
        price = np.float32(top / bottom)
        quantity = np.float32(np.float64(base_quantity) / base_multiplier)

    return float(price), float(quantity)


def _ring_length(data) -> int:
    ring_len = len(data) - HEADER_LAYOUT_SPAN
    if ring_len % NODE_LAYOUT_SPAN != 0 and bytes(data[-len(SERUM_TAIL):]) == SERUM_TAIL:
        ring_len -= len(SERUM_TAIL)
    if ring_len % NODE_LAYOUT_SPAN != 0:
        raise LayoutSizeError(
            f"Event queue ring of {ring_len} bytes is not a multiple of {NODE_LAYOUT_SPAN}"
        )
    return ring_len


@dataclass(frozen=True)
class EventQueue:
    account_flags: AccountFlags
    head: int
    count: int
    seq_num: int
    events: Tuple[TradeEvent, ...] = field(repr=False)
    base_decimals: int
    quote_decimals: int
    base_lot_size: int = 0
    quote_lot_size: int = 0

    def __len__(self):
        return len(self.events)

    def __getitem__(self, idx) -> TradeEvent:
        return self.events[idx]

    @property
    def latest_fill(self) -> Optional[TradeEvent]:
        return self.events[0] if self.events else None

    @classmethod
    def from_bytes(
        cls,
        data,
        base_decimals: int,
        quote_decimals: int,
        base_lot_size: int = 0,
        quote_lot_size: int = 0,
    ) -> "EventQueue":
        validate_serum_data(data)
        require_span(data, HEADER_LAYOUT_SPAN, "Event queue")
        header = EVENT_QUEUE_HEADER_LAYOUT.parse(read_fixed_bytes(data, 0, HEADER_LAYOUT_SPAN))
        alloc_len = _ring_length(data) // NODE_LAYOUT_SPAN

        events = []
        for node_index in ring_indices(header.head, header.count, alloc_len):
            offset = HEADER_LAYOUT_SPAN + node_index * NODE_LAYOUT_SPAN
            # only fills with a non zero payment become trade events
            if read_u8(data, offset) & FILL_FLAG == 0:
                continue
            if read_u64(data, offset + NATIVE_QUANTITY_PAID_OFFSET) == 0:
                continue

            event = EVENT_LAYOUT.parse(read_fixed_bytes(data, offset, NODE_LAYOUT_SPAN))
            price, quantity = fill_price_and_quantity(
                event.event_flags,
                event.native_quantity_paid,
                event.native_quantity_released,
                event.native_fee_or_rebate,
                base_decimals,
                quote_decimals,
            )
            events.append(
                TradeEvent(
                    open_orders=event.open_orders,
                    native_quantity_paid=event.native_quantity_paid,
                    native_quantity_released=event.native_quantity_released,
                    native_fee_or_rebate=event.native_fee_or_rebate,
                    order_id=event.order_id,
                    event_flags=event.event_flags,
                    open_orders_slot=event.open_orders_slot,
                    fee_tier=event.fee_tier,
                    client_order_id=event.client_order_id,
                    float_price=price,
                    float_quantity=quantity,
                )
            )

        logger.debug(
            "decoded event queue: %d slots, head=%d, count=%d, seq_num=%d, %d fills",
            alloc_len,
            header.head,
            header.count,
            header.seq_num,
            len(events),
        )
        return cls(
            account_flags=header.account_flags,
            head=header.head,
            count=header.count,
            seq_num=header.seq_num,
            events=tuple(events),
            base_decimals=base_decimals,
            quote_decimals=quote_decimals,
            base_lot_size=base_lot_size,
            quote_lot_size=quote_lot_size,
        )

    @classmethod
    def from_market_bytes(cls, data, market, base_decimals: int, quote_decimals: int) -> "EventQueue":
        return cls.from_bytes(
            data,
            base_decimals,
            quote_decimals,
            base_lot_size=market.base_lot_size,
            quote_lot_size=market.quote_lot_size,
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per fill, newest first."""
        columns = [
            "open_orders",
            "side",
            "maker",
            "price",
            "quantity",
            "native_quantity_paid",
            "native_quantity_released",
            "native_fee_or_rebate",
            "order_id",
            "client_order_id",
            "open_orders_slot",
            "fee_tier",
        ]
        rows = [
            (
                str(e.open_orders),
                e.side.name.lower(),
                e.event_flags.maker,
                e.float_price,
                e.float_quantity,
                e.native_quantity_paid,
                e.native_quantity_released,
                e.native_fee_or_rebate,
                int.from_bytes(e.order_id, byteorder="little"),
                e.client_order_id,
                e.open_orders_slot,
                e.fee_tier,
            )
            for e in self.events
        ]
        return pd.DataFrame(rows, columns=columns)
