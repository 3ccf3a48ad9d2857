# sources/coingecko.py
# CoinGecko – historische SOL-Preise für die USD-Bewertung der Receipts

import requests

from core.constants import PRICE_RANGE_PAD_SECONDS
from core.models import PricePoint
from sources.backoff import backoff_fetch, json_body, UpstreamError
from utils.log import debug_log


class CoinGeckoClient:

    def __init__(self, settings, session: requests.Session | None = None):
        self.base = settings.coingecko_base
        self.api_key = settings.coingecko_api_key
        self.session = session or requests.Session()

    def fetch_sol_price_history(self, from_sec: int, to_sec: int) -> list[PricePoint]:
        """
        Range query with one hour of padding on both ends.
        Raises UpstreamError; callers decide about fallbacks.
        """
        params = {
            "vs_currency": "usd",
            "from": str(max(0, int(from_sec) - PRICE_RANGE_PAD_SECONDS)),
            "to": str(int(to_sec) + PRICE_RANGE_PAD_SECONDS),
        }
        if self.api_key:
            params["x_cg_demo_api_key"] = self.api_key

        res = backoff_fetch(
            f"{self.base}/coins/solana/market_chart/range",
            category="COINGECKO",
            session=self.session,
            params=params,
        )
        data = json_body(res, "COINGECKO")

        prices = data.get("prices") if isinstance(data, dict) else None
        if not isinstance(prices, list):
            raise UpstreamError("[COINGECKO] market_chart/range returned no prices", category="COINGECKO")

        series = []
        for row in prices:
            try:
                t_ms, price = row[0], row[1]
                series.append(PricePoint(int(t_ms), float(price)))
            except (TypeError, ValueError, IndexError):
                continue

        debug_log("COINGECKO", f"Historical SOL prices fetched ({len(series)} points)")
        return series
