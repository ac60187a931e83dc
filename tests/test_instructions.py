from __future__ import annotations

import struct

import pytest

from openserum.serum import instructions
from openserum.serum.instructions import Order, new_order_v3_data, write_new_order_v3
from openserum.serum.state import OrderType, SelfTradeBehavior, Side
from openserum.utils.errors import BoundsError, FieldRangeError


def _order() -> Order:
    return Order(
        price=1234,
        quantity=56,
        client_id=0xDEADBEEF,
        max_quote_quantity=789_000,
        side=Side.ASK,
        order_type=OrderType.POST_ONLY,
        self_trade_behavior=SelfTradeBehavior.ABORT_TRANSACTION,
    )


def test_span():
    assert instructions.NEW_ORDER_V3_SPAN == 51


def test_payload_fields():
    data = new_order_v3_data(_order())
    assert len(data) == 51
    assert struct.unpack("<BIIQQQIIQH", data) == (
        0,
        10,
        Side.ASK,
        1234,
        56,
        789_000,
        SelfTradeBehavior.ABORT_TRANSACTION,
        OrderType.POST_ONLY,
        0xDEADBEEF,
        65535,
    )


def test_field_offsets():
    data = new_order_v3_data(_order())
    assert data[instructions.SIDE_INDEX:instructions.SIDE_INDEX + 4] == b"\x01\x00\x00\x00"
    assert instructions.LIMIT_PRICE_INDEX == 9
    assert instructions.CLIENT_ID_INDEX == 41
    assert data[49:51] == b"\xff\xff"


def test_default_order_is_a_limit_bid():
    order = Order(price=1, quantity=1)
    assert order.is_buy
    data = new_order_v3_data(order)
    assert struct.unpack_from("<I", data, 5)[0] == Side.BID
    assert struct.unpack_from("<II", data, 33) == (0, 0)


def test_writes_into_larger_buffer():
    buffer = bytearray(b"\xaa" * 60)
    write_new_order_v3(buffer, _order())
    assert bytes(buffer[:51]) == new_order_v3_data(_order())
    assert buffer[51:] == b"\xaa" * 9


def test_buffer_too_small():
    buffer = bytearray(50)
    with pytest.raises(BoundsError):
        write_new_order_v3(buffer, _order())
    assert buffer == bytearray(50)


def test_negative_client_id_is_twos_complement():
    data = new_order_v3_data(Order(price=1, quantity=1, client_id=-1))
    assert data[41:49] == b"\xff" * 8
    assert struct.unpack_from("<q", data, 41)[0] == -1


@pytest.mark.parametrize(
    "order, field_name",
    [
        (Order(price=2 ** 64, quantity=1), "price"),
        (Order(price=1, quantity=-1), "quantity"),
        (Order(price=1, quantity=1, max_quote_quantity=2 ** 64), "max_quote_quantity"),
        (Order(price=1, quantity=1, client_id=2 ** 64), "client_id"),
        (Order(price=1, quantity=1, client_id=-(2 ** 63) - 1), "client_id"),
    ],
)
def test_out_of_range_fields(order, field_name):
    buffer = bytearray(51)
    with pytest.raises(FieldRangeError, match=field_name) as excinfo:
        write_new_order_v3(buffer, order)
    assert excinfo.value.name == field_name
    assert isinstance(excinfo.value, ValueError)
    assert buffer == bytearray(51)
