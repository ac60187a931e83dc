from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey

from openserum.serum.state.base import OrderType, SelfTradeBehavior, Side
from openserum.utils.cursor import (
    I64_MIN,
    U8_SIZE_BYTES,
    U16_SIZE_BYTES,
    U32_MAX,
    U32_SIZE_BYTES,
    U64_MAX,
    U64_SIZE_BYTES,
    check_bounds,
    check_range,
    write_fixed_bytes,
    write_u16,
    write_u32,
    write_u64,
)

NEW_ORDER_V3_IX_CODE = 10
LAYOUT_VERSION = 0
DEFAULT_LIMIT = 65535

# version u8, then the u32 instruction tag and NewOrderV3 fields
INSTRUCTION_INDEX = U8_SIZE_BYTES
SIDE_INDEX = INSTRUCTION_INDEX + U32_SIZE_BYTES
LIMIT_PRICE_INDEX = SIDE_INDEX + U32_SIZE_BYTES
MAX_BASE_QUANTITY_INDEX = LIMIT_PRICE_INDEX + U64_SIZE_BYTES
MAX_QUOTE_QUANTITY_INDEX = MAX_BASE_QUANTITY_INDEX + U64_SIZE_BYTES
SELF_TRADE_BEHAVIOR_INDEX = MAX_QUOTE_QUANTITY_INDEX + U64_SIZE_BYTES
ORDER_TYPE_INDEX = SELF_TRADE_BEHAVIOR_INDEX + U32_SIZE_BYTES
CLIENT_ID_INDEX = ORDER_TYPE_INDEX + U32_SIZE_BYTES
LIMIT_INDEX = CLIENT_ID_INDEX + U64_SIZE_BYTES
NEW_ORDER_V3_SPAN = LIMIT_INDEX + U16_SIZE_BYTES


@dataclass
class Order:
    """An order that has not been submitted yet. Prices and quantities are in lots.

    ``client_id`` may be given as a signed 64 bit value, negative ids are
    written as their two's complement.
    """

    price: int
    quantity: int
    client_id: int = 0
    max_quote_quantity: int = 0
    side: Side = Side.BID
    order_type: OrderType = OrderType.LIMIT
    self_trade_behavior: SelfTradeBehavior = SelfTradeBehavior.DECREMENT_TAKE
    owner: Optional[Pubkey] = None

    @property
    def is_buy(self) -> bool:
        return self.side == Side.BID


def _check_order(order: Order):
    check_range(order.side, 0, U32_MAX, "side")
    check_range(order.price, 0, U64_MAX, "price")
    check_range(order.quantity, 0, U64_MAX, "quantity")
    check_range(order.max_quote_quantity, 0, U64_MAX, "max_quote_quantity")
    check_range(order.self_trade_behavior, 0, U32_MAX, "self_trade_behavior")
    check_range(order.order_type, 0, U32_MAX, "order_type")
    check_range(order.client_id, I64_MIN, U64_MAX, "client_id")


def write_new_order_v3(buffer, order: Order):
    """Writes the NewOrderV3 instruction data for ``order`` into the start of ``buffer``.

    Nothing is written unless the buffer is large enough and every field fits.
    """
    check_bounds(buffer, 0, NEW_ORDER_V3_SPAN)
    _check_order(order)
    write_fixed_bytes(buffer, 0, bytes([LAYOUT_VERSION]))
    write_u32(buffer, INSTRUCTION_INDEX, NEW_ORDER_V3_IX_CODE)
    write_u32(buffer, SIDE_INDEX, order.side, "side")
    write_u64(buffer, LIMIT_PRICE_INDEX, order.price, "price")
    write_u64(buffer, MAX_BASE_QUANTITY_INDEX, order.quantity, "quantity")
    write_u64(buffer, MAX_QUOTE_QUANTITY_INDEX, order.max_quote_quantity, "max_quote_quantity")
    write_u32(buffer, SELF_TRADE_BEHAVIOR_INDEX, order.self_trade_behavior, "self_trade_behavior")
    write_u32(buffer, ORDER_TYPE_INDEX, order.order_type, "order_type")
    write_u64(buffer, CLIENT_ID_INDEX, order.client_id & U64_MAX, "client_id")
    write_u16(buffer, LIMIT_INDEX, DEFAULT_LIMIT)


def new_order_v3_data(order: Order) -> bytes:
    buffer = bytearray(NEW_ORDER_V3_SPAN)
    write_new_order_v3(buffer, order)
    return bytes(buffer)
