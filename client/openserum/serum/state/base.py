from dataclasses import dataclass
from enum import IntEnum

from construct import Int64ul

from openserum.utils.cursor import read_fixed_bytes, require_span
from openserum.utils.errors import MagicMismatchError
from openserum.utils.layouts import FlagsAdapter

SERUM_MAGIC = b"serum"
SERUM_TAIL = b"padding"

ACCOUNT_FLAGS_OFFSET = len(SERUM_MAGIC)
ACCOUNT_FLAGS_SIZE_BYTES = 8


@dataclass(frozen=True)
class AccountFlags:
    initialized: bool = False
    market: bool = False
    open_orders: bool = False
    request_queue: bool = False
    event_queue: bool = False
    bids: bool = False
    asks: bool = False


ACCOUNT_FLAGS_LAYOUT = FlagsAdapter(Int64ul, AccountFlags)


class Side(IntEnum):
    BID = 0
    ASK = 1


class OrderType(IntEnum):
    LIMIT = 0
    IMMEDIATE_OR_CANCEL = 1
    POST_ONLY = 2


class SelfTradeBehavior(IntEnum):
    DECREMENT_TAKE = 0
    CANCEL_PROVIDE = 1
    ABORT_TRANSACTION = 2


def validate_serum_data(data):
    """Raises MagicMismatchError unless ``data`` starts with the ``serum`` blob."""
    prefix = bytes(data[:len(SERUM_MAGIC)])
    if prefix != SERUM_MAGIC:
        raise MagicMismatchError(prefix)


def read_account_flags(data) -> AccountFlags:
    require_span(data, ACCOUNT_FLAGS_OFFSET + ACCOUNT_FLAGS_SIZE_BYTES, "Account flags")
    return ACCOUNT_FLAGS_LAYOUT.parse(
        read_fixed_bytes(data, ACCOUNT_FLAGS_OFFSET, ACCOUNT_FLAGS_SIZE_BYTES)
    )
