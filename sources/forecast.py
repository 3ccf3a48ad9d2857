# sources/forecast.py
# ASDForecast – Plattform-Statistiken (Volume, Fees, Winnings, User)

import requests

from sources.backoff import backoff_fetch
from utils.log import debug_log

FORECAST_STAT_FIELDS = ("totalVolume", "totalFees", "totalWinnings", "totalLifetimeUsers")


class ForecastClient:

    def __init__(self, base_url: str, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def fetch_platform_stats(self) -> dict | None:
        """
        GET /api/state → platformStats, missing fields default to 0.
        Returns None when the platform is unreachable.
        """
        url = f"{self.base_url}/api/state"
        debug_log("FORECAST_API", f"Fetching stats from: {url}")

        try:
            res = backoff_fetch(url, category="FORECAST_API", session=self.session)
            data = res.json()
        except Exception as e:
            debug_log("FORECAST_API", f"Failed to fetch ASDForecast stats: {e}", True)
            return None

        platform = data.get("platformStats") if isinstance(data, dict) else None
        if not isinstance(platform, dict):
            platform = {}
        stats = {field: platform.get(field) or 0 for field in FORECAST_STAT_FIELDS}

        debug_log("FORECAST_API", f"ASDForecast stats retrieved. Users: {stats['totalLifetimeUsers']}")
        return stats
