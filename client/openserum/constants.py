import os

LAMPORTS_PER_SOL = 1_000_000_000

# empirically tuned, see get_lamports_needed_for_sol_wrapping
SOL_WRAPPING_SLIPPAGE = float(os.environ.get("SOL_WRAPPING_SLIPPAGE", "1.01"))
SOL_WRAPPING_BUFFER_LAMPORTS = int(os.environ.get("SOL_WRAPPING_BUFFER_LAMPORTS", "10000000"))
