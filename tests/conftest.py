"""Builders for byte exact synthetic account buffers.

Fields are written at the documented offsets with ``struct`` directly, so the
layouts under test are checked against an independent description.
"""
from __future__ import annotations

import struct

import pytest

from solders.pubkey import Pubkey

EVENT_STRUCT = struct.Struct("<BBB5xQQQ16s32sQ")

FLAG_INITIALIZED = 1 << 0
FLAG_MARKET = 1 << 1
FLAG_OPEN_ORDERS = 1 << 2
FLAG_REQUEST_QUEUE = 1 << 3
FLAG_EVENT_QUEUE = 1 << 4
FLAG_BIDS = 1 << 5
FLAG_ASKS = 1 << 6

EVENT_FILL = 1 << 0
EVENT_OUT = 1 << 1
EVENT_BID = 1 << 2
EVENT_MAKER = 1 << 3


def key(n: int) -> Pubkey:
    return Pubkey(bytes([n]) * 32)


def u64f64_bytes(high: int, low: int) -> bytes:
    return low.to_bytes(8, "little") + high.to_bytes(8, "little")


def build_market(flags: int = FLAG_INITIALIZED | FLAG_MARKET, length: int = 388) -> bytearray:
    data = bytearray(length)
    data[0:5] = b"serum"
    struct.pack_into("<Q", data, 5, flags)
    data[13:45] = bytes(key(1))
    struct.pack_into("<Q", data, 45, 3)
    data[53:85] = bytes(key(2))
    data[85:117] = bytes(key(3))
    data[117:149] = bytes(key(4))
    struct.pack_into("<QQ", data, 149, 1_000, 11)
    data[165:197] = bytes(key(5))
    struct.pack_into("<QQQ", data, 197, 2_000, 22, 100)
    data[221:253] = bytes(key(6))
    data[253:285] = bytes(key(7))
    data[285:317] = bytes(key(8))
    data[317:349] = bytes(key(9))
    struct.pack_into("<QQQQ", data, 349, 100_000_000, 100, 22, 5)
    if length >= 388:
        data[381:388] = b"padding"
    return data


def build_event(
    flags: int,
    paid: int,
    released: int,
    fee: int = 0,
    slot: int = 0,
    fee_tier: int = 0,
    order_id: bytes = bytes(16),
    owner: int = 10,
    client_order_id: int = 0,
) -> bytes:
    return EVENT_STRUCT.pack(
        flags, slot, fee_tier, released, paid, fee, order_id, bytes(key(owner)), client_order_id
    )


def build_event_queue(
    records,
    head: int = 0,
    count: int = 0,
    seq_num: int = 0,
    flags: int = FLAG_INITIALIZED | FLAG_EVENT_QUEUE,
    tail: bytes = b"",
) -> bytearray:
    header = bytearray(37)
    header[0:5] = b"serum"
    struct.pack_into("<Q", header, 5, flags)
    struct.pack_into("<I", header, 13, head)
    struct.pack_into("<I", header, 21, count)
    struct.pack_into("<I", header, 29, seq_num)
    return header + b"".join(records) + tail


def build_open_orders(
    free_slot_bits: int = (1 << 128) - 1,
    is_bid_bits: int = 0,
    orders=None,
    client_ids=None,
    flags: int = FLAG_INITIALIZED | FLAG_OPEN_ORDERS,
    length: int = 3228,
) -> bytearray:
    data = bytearray(length)
    data[0:5] = b"serum"
    struct.pack_into("<Q", data, 5, flags)
    data[13:45] = bytes(key(1))
    data[45:77] = bytes(key(2))
    struct.pack_into("<QQQQ", data, 77, 10, 20, 30, 40)
    data[109:125] = free_slot_bits.to_bytes(16, "little")
    data[125:141] = is_bid_bits.to_bytes(16, "little")
    for slot, (fragment, price) in (orders or {}).items():
        data[141 + slot * 16:141 + slot * 16 + 8] = fragment
        struct.pack_into("<Q", data, 141 + slot * 16 + 8, price)
    for slot, client_id in (client_ids or {}).items():
        struct.pack_into("<Q", data, 2189 + slot * 8, client_id)
    struct.pack_into("<Q", data, 3213, 77)
    if length >= 3228:
        data[3221:3228] = b"padding"
    return data


def build_mango_group(flags: int = 0b0011, length: int = 1016) -> bytearray:
    data = bytearray(length)
    data[0] = flags
    for i in range(5):
        data[8 + i * 32:8 + (i + 1) * 32] = bytes(key(20 + i))
        data[168 + i * 32:168 + (i + 1) * 32] = bytes(key(30 + i))
        index = 328 + i * 40
        struct.pack_into("<Q", data, index, 1_600_000_000 + i)
        data[index + 8:index + 24] = u64f64_bytes(1, 1 << 63)
        data[index + 24:index + 40] = u64f64_bytes(i + 1, 0)
        data[856 + i * 16:856 + (i + 1) * 16] = u64f64_bytes(1000 * (i + 1), 0)
        data[936 + i * 16:936 + (i + 1) * 16] = u64f64_bytes(0, 1 << 62)
    for i in range(4):
        data[528 + i * 32:528 + (i + 1) * 32] = bytes(key(40 + i))
        data[656 + i * 32:656 + (i + 1) * 32] = bytes(key(50 + i))
    struct.pack_into("<Q", data, 784, 254)
    data[792:824] = bytes(key(60))
    data[824:856] = bytes(key(61))
    return data


@pytest.fixture
def market_bytes() -> bytearray:
    return build_market()


@pytest.fixture
def open_orders_bytes() -> bytearray:
    return build_open_orders()


@pytest.fixture
def mango_group_bytes() -> bytearray:
    return build_mango_group()
