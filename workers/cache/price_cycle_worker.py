# ========================================
# 💲 PRICE CYCLE WORKER – "Staggered Lift"
# Token- und SOL-Spotpreis, sonst nichts
# ========================================

from core.constants import TOKEN_MINT
from utils.log import debug_log
from utils.time_helpers import utc_now_ts_ms


class PriceCycle:

    def __init__(self, snapshot, helius, clock=utc_now_ts_ms, mint: str = TOKEN_MINT):
        self.snapshot = snapshot
        self.helius = helius
        self.clock = clock
        self.mint = mint

    def run(self) -> bool:
        debug_log("CACHE_PRICE", "Starting ASDF token + SOL price fetch...")

        try:
            # beide Clients liefern 0.0 statt Exception
            token_price = self.helius.fetch_token_price_usd(self.mint)
            sol_price = self.helius.fetch_sol_price_usd()
            self.snapshot.commit_prices(token_price, sol_price, self.clock())

        except Exception as e:
            debug_log("CACHE_PRICE", f"Failed to update prices: {e}", True)
            self.snapshot.touch(self.clock())
            return False

        prices = self.snapshot.read().prices
        debug_log(
            "CACHE_PRICE",
            f"Prices updated. ASDF: ${prices.tokenPriceUsd:.10f} | SOL: ${prices.solPriceUsd:.2f}",
        )
        return token_price > 0 and sol_price > 0
