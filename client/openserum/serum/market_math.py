"""
Conversions between on-chain lot units and human scale numbers.

Human scale inputs are single precision, so prices and sizes are rounded to
float32 before the double precision arithmetic.
"""
import math
from typing import Optional

import numpy as np
from solders.pubkey import Pubkey

from openserum import constants
from openserum.program_ids import SERUM_PROGRAM_ID_V3
from openserum.utils.cursor import U64_SIZE_BYTES, read_u8

# MINT_LAYOUT = blob(44), u8 decimals, blob(37)
TOKEN_MINT_DECIMALS_OFFSET = 44


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _single(x: float) -> float:
    return float(np.float32(x))


def read_decimals_from_token_mint(data) -> int:
    return read_u8(data, TOKEN_MINT_DECIMALS_OFFSET)


def price_lots_to_number(
    price: int, base_decimals: int, quote_decimals: int, base_lot_size: int, quote_lot_size: int
) -> float:
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        top = np.float64(price) * quote_lot_size * 10.0 ** base_decimals
        bottom = np.float64(base_lot_size) * 10.0 ** quote_decimals
        return float(np.float32(top / bottom))


def price_number_to_lots(
    price: float, base_decimals: int, quote_decimals: int, base_lot_size: int, quote_lot_size: int
) -> int:
    top = _single(price) * 10.0 ** quote_decimals * base_lot_size
    bottom = 10.0 ** base_decimals * quote_lot_size
    return _round_half_up(top / bottom)


def base_size_lots_to_number(size: int, base_decimals: int, base_lot_size: int) -> float:
    return float(np.float32(size * base_lot_size / 10.0 ** base_decimals))


def base_size_number_to_lots(size: float, base_decimals: int, base_lot_size: int) -> int:
    native_size = _round_half_up(_single(size) * 10.0 ** base_decimals)
    return int(native_size / base_lot_size)


def get_max_quote_quantity(price: float, size: float, market, base_decimals: int, quote_decimals: int) -> int:
    return (
        market.quote_lot_size
        * base_size_number_to_lots(size, base_decimals, market.base_lot_size)
        * price_number_to_lots(price, base_decimals, quote_decimals, market.base_lot_size, market.quote_lot_size)
    )


def get_lamports_needed_for_sol_wrapping(
    price: float,
    size: float,
    is_buy: bool,
    open_orders=None,
    slippage: Optional[float] = None,
    buffer_lamports: Optional[int] = None,
) -> int:
    """Lamports to wrap before placing an order on a wrapped SOL market.

    Buys pay ``price * size`` plus a slippage allowance in quote, sells pay
    ``size`` in base. Free balances already sitting in ``open_orders`` are
    deducted, and a flat buffer is always added on top.
    """
    if slippage is None:
        slippage = constants.SOL_WRAPPING_SLIPPAGE
    if buffer_lamports is None:
        buffer_lamports = constants.SOL_WRAPPING_BUFFER_LAMPORTS

    if is_buy:
        # the notional itself is a single precision product
        notional = float(np.float32(price) * np.float32(size))
        lamports = _round_half_up(notional * slippage * constants.LAMPORTS_PER_SOL)
        if open_orders is not None:
            lamports -= open_orders.quote_token_free
    else:
        lamports = int(_single(size) * constants.LAMPORTS_PER_SOL)
        if open_orders is not None:
            lamports -= open_orders.base_token_free

    return max(lamports, 0) + buffer_lamports


def get_vault_signer(market, program_id: Pubkey = SERUM_PROGRAM_ID_V3) -> Pubkey:
    """Program address that owns ``market``'s base and quote vaults."""
    seeds = [bytes(market.own_address), market.vault_signer_nonce.to_bytes(U64_SIZE_BYTES, "little")]
    return Pubkey.create_program_address(seeds, program_id)
