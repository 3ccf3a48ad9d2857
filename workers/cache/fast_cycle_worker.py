# =====================================================
# 🔥 FAST CYCLE WORKER – "Heavy Lift"
# Supply → Transaktionen → Ableitungen → Forecast-Stats
# =====================================================

from core.constants import (
    TOKEN_MINT,
    TOKEN_TOTAL_SUPPLY,
    TRACKED_WALLET,
    PURCHASE_SOURCE_ADDRESS,
)
from core.derivations import (
    compute_burn,
    extract_receipts,
    compute_lifetime_usd,
    compute_token_flows,
)
from core.snapshot import BurnStats, WalletStats, ForecastStats
from utils.log import debug_log
from utils.time_helpers import utc_now_ts_ms


class FastCycle:
    """
    One run = one complete pipeline. Burn, wallet and forecast records are
    committed together at the end; any exception abandons the commit and
    only advances ``lastUpdated``. Spot prices are never touched here.
    """

    def __init__(
        self,
        snapshot,
        helius,
        price_history,
        forecast=None,
        clock=utc_now_ts_ms,
        mint: str = TOKEN_MINT,
        total_supply: float = TOKEN_TOTAL_SUPPLY,
        wallet: str = TRACKED_WALLET,
        purchase_source: str = PURCHASE_SOURCE_ADDRESS,
    ):
        self.snapshot = snapshot
        self.helius = helius
        self.price_history = price_history
        self.forecast = forecast
        self.clock = clock
        self.mint = mint
        self.total_supply = total_supply
        self.wallet = wallet
        self.purchase_source = purchase_source

    def _forecast_stats(self):
        if self.forecast is None or not self.forecast.enabled:
            return ForecastStats()

        stats = self.forecast.fetch_platform_stats()
        if stats is None:
            # Plattform down → alten Record behalten
            return None
        return ForecastStats(**stats)

    def run(self) -> bool:
        debug_log("CACHE_MAIN", "Starting data fetch (Heavy Lift)...")

        try:
            # ---- 1. Burn
            current_supply = self.helius.get_token_supply_ui(self.mint)
            burn = BurnStats(**compute_burn(current_supply, self.total_supply))

            # ---- 2. Wallet (Helius TXs)
            txs = self.helius.get_all_enhanced_transactions(self.wallet)
            receipts, total_sol = extract_receipts(txs, self.wallet)

            # ---- 3. Historische SOL-Preise
            timestamps = [r.timestamp for r in receipts if r.timestamp is not None]
            if timestamps:
                series = self.price_history.get(min(timestamps), max(timestamps))
                lifetime_usd = compute_lifetime_usd(receipts, series)
            else:
                lifetime_usd = 0.0

            flows = compute_token_flows(txs, self.wallet, self.mint, self.purchase_source)

            wallet = WalletStats(
                ctoFeesSol=total_sol,
                ctoFeesUsd=lifetime_usd,
                purchasedFromSource=flows["purchasedFromSource"],
            )

            # ---- 4. ASDForecast (cross service)
            forecast = self._forecast_stats()

            # ---- 5. Commit
            self.snapshot.commit_fast_cycle(burn, wallet, forecast, self.clock())

        except Exception as e:
            debug_log("CACHE_MAIN", f"Failed to update cache (Heavy Lift): {e}", True)
            self.snapshot.touch(self.clock())
            return False

        debug_log(
            "CACHE_MAIN",
            f"Heavy lift data successfully cached. "
            f"burned={burn.burnedPercent:.4f}% | txs={len(txs)} | receipts={len(receipts)} | "
            f"fees={total_sol:.4f} SOL (${lifetime_usd:.2f})",
        )
        return True
