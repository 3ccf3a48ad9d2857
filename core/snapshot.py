"""
Cache-Snapshot – prozessweiter Zustand hinter der Read-API.

Schreiber: Fast-Cycle (burn / wallet / forecast) und Price-Cycle (prices).
Leser: nur die Flask-Routen.

Jeder Commit baut einen neuen, unveränderlichen ``SnapshotView`` und tauscht
die Referenz unter einem Lock aus. Leser sehen deshalb immer ganze
Sub-Records, nie eine halbe Aktualisierung. ``last_updated`` (Epoch-ms)
fällt nie.
"""

import threading
from dataclasses import dataclass, field, replace, asdict

from utils.time_helpers import age_seconds


@dataclass(frozen=True)
class BurnStats:
    burnedAmount: float = 0.0
    currentSupply: float = 0.0
    burnedPercent: float = 0.0


@dataclass(frozen=True)
class WalletStats:
    ctoFeesSol: float = 0.0
    ctoFeesUsd: float = 0.0
    purchasedFromSource: float = 0.0


@dataclass(frozen=True)
class ForecastStats:
    totalVolume: float = 0
    totalFees: float = 0
    totalWinnings: float = 0
    totalLifetimeUsers: int = 0


@dataclass(frozen=True)
class SpotPrices:
    # 0.0 = noch kein bekannter Kurs
    tokenPriceUsd: float = 0.0
    solPriceUsd: float = 0.0


@dataclass(frozen=True)
class SnapshotView:
    burn: BurnStats | None = None
    wallet: WalletStats = field(default_factory=WalletStats)
    forecast: ForecastStats = field(default_factory=ForecastStats)
    prices: SpotPrices = field(default_factory=SpotPrices)
    last_updated: int = 0

    @property
    def is_initialized(self) -> bool:
        return self.last_updated != 0

    # -------------------------
    # JSON payloads
    # -------------------------
    def burn_payload(self) -> dict:
        payload = asdict(self.burn) if self.burn else {}
        payload.update(asdict(self.forecast))
        payload["lastUpdated"] = self.last_updated
        return payload

    def wallet_payload(self) -> dict:
        payload = asdict(self.wallet)
        payload.update(asdict(self.prices))
        payload["lastUpdated"] = self.last_updated
        return payload

    def health_payload(self, now_ms: int) -> dict:
        return {
            "status": "ok",
            "message": "ASDF Tracker Backend is running and serving cached data.",
            "cacheAge": f"{age_seconds(self.last_updated, now_ms)} seconds old",
            "lastPrice": self.prices.tokenPriceUsd,
        }


class CacheSnapshot:

    def __init__(self):
        self._lock = threading.Lock()
        self._view = SnapshotView()

    def read(self) -> SnapshotView:
        return self._view

    @property
    def is_initialized(self) -> bool:
        return self._view.is_initialized

    def _advance(self, view: SnapshotView, now_ms: int) -> int:
        return max(view.last_updated, int(now_ms))

    def commit_fast_cycle(self, burn: BurnStats, wallet: WalletStats, forecast: ForecastStats | None, now_ms: int):
        """Replace burn / wallet (and forecast, if given). Prices stay untouched."""
        with self._lock:
            view = self._view
            self._view = replace(
                view,
                burn=burn,
                wallet=wallet,
                forecast=forecast if forecast is not None else view.forecast,
                last_updated=self._advance(view, now_ms),
            )

    def commit_prices(self, token_price_usd: float, sol_price_usd: float, now_ms: int):
        """Zero means unknown: a zero quote never replaces a known price."""
        with self._lock:
            view = self._view
            prices = SpotPrices(
                tokenPriceUsd=token_price_usd if token_price_usd > 0 else view.prices.tokenPriceUsd,
                solPriceUsd=sol_price_usd if sol_price_usd > 0 else view.prices.solPriceUsd,
            )
            self._view = replace(view, prices=prices, last_updated=self._advance(view, now_ms))

    def touch(self, now_ms: int):
        with self._lock:
            view = self._view
            self._view = replace(view, last_updated=self._advance(view, now_ms))
