from typing import Optional, Union

from .base import *
from .event_queue import *
from .market_state import *
from .open_orders import *


def account_parser(
    data,
    base_decimals: Optional[int] = None,
    quote_decimals: Optional[int] = None,
    market: Optional[Market] = None,
) -> Union[Market, OpenOrdersAccount, EventQueue, None]:
    validate_serum_data(data)
    flags = read_account_flags(data)
    if not flags.initialized:
        return None
    elif flags.market:
        return Market.from_bytes(data)
    elif flags.open_orders:
        return OpenOrdersAccount.from_bytes(data)
    elif flags.event_queue:
        if base_decimals is None or quote_decimals is None:
            raise ValueError("Event queue accounts need base_decimals and quote_decimals")
        if market is not None:
            return EventQueue.from_market_bytes(data, market, base_decimals, quote_decimals)
        return EventQueue.from_bytes(data, base_decimals, quote_decimals)
    raise ValueError(f"Unsupported serum account type: {flags}")
