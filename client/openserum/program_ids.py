import os

from solders.pubkey import Pubkey

SERUM_PROGRAM_ID_V3 = Pubkey.from_string(
    os.environ.get("SERUM_DEX", "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin")
)
WRAPPED_SOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
