from .instructions import Order, new_order_v3_data, write_new_order_v3
from .market_math import get_vault_signer
from .state import (
    AccountFlags,
    EventQueue,
    Market,
    OpenOrder,
    OpenOrdersAccount,
    OrderType,
    SelfTradeBehavior,
    Side,
    TradeEvent,
    account_parser,
)

__all__ = [
    "AccountFlags",
    "EventQueue",
    "Market",
    "OpenOrder",
    "OpenOrdersAccount",
    "Order",
    "OrderType",
    "SelfTradeBehavior",
    "Side",
    "TradeEvent",
    "account_parser",
    "get_vault_signer",
    "new_order_v3_data",
    "write_new_order_v3",
]
