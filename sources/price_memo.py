# ===========================================================
# 💾 SOL PRICE HISTORY – optionaler Disk-Memo vor CoinGecko
# Eine rollende Serie, 6h frisch, Fallback auf stale Daten
# ===========================================================

import os
import json

from core.constants import PRICE_MEMO_MAX_AGE
from core.models import PricePoint
from utils.log import debug_log
from utils.time_helpers import utc_now_ts


def _series_from_rows(rows) -> list[PricePoint]:
    return [PricePoint(int(t), float(p)) for t, p in rows]


class SolPriceHistory:
    """
    Historical SOL/USD series for the fee valuation.

    With ``memo_path`` empty every call goes straight to CoinGecko and a
    failed fetch yields an empty series. With a path the last good series is
    kept on disk and reused while younger than ``max_age`` seconds.
    """

    def __init__(self, client, memo_path: str = "", max_age: int = PRICE_MEMO_MAX_AGE, clock=utc_now_ts):
        self.client = client
        self.memo_path = memo_path
        self.max_age = max_age
        self.clock = clock

    # -------------------------
    # Disk
    # -------------------------
    def load_memo(self):
        if not self.memo_path or not os.path.exists(self.memo_path):
            return None

        try:
            with open(self.memo_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            return {
                "fetched_at": int(payload["fetched_at"]),
                "prices": _series_from_rows(payload["prices"]),
            }
        except (OSError, ValueError, KeyError, TypeError) as e:
            debug_log("PRICE_MEMO", f"Ignoring unreadable memo {self.memo_path}: {e}", True)
            return None

    def store_memo(self, series: list[PricePoint], from_sec: int, to_sec: int):
        payload = {
            "fetched_at": self.clock(),
            "from": int(from_sec),
            "to": int(to_sec),
            "prices": [[p.t_ms, p.price_usd] for p in series],
        }

        directory = os.path.dirname(os.path.abspath(self.memo_path))
        tmp_path = f"{self.memo_path}.tmp"
        try:
            os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(json.dumps(payload, separators=(",", ":")))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.memo_path)
        except OSError as e:
            debug_log("PRICE_MEMO", f"Failed to write memo {self.memo_path}: {e}", True)

    # -------------------------
    # Lookup
    # -------------------------
    def get(self, from_sec: int, to_sec: int) -> list[PricePoint]:
        if not self.memo_path:
            try:
                return self.client.fetch_sol_price_history(from_sec, to_sec)
            except Exception as e:
                debug_log("COINGECKO", f"Failed to fetch historical SOL prices: {e}", True)
                return []

        memo = self.load_memo()
        if memo and self.clock() - memo["fetched_at"] < self.max_age:
            debug_log("PRICE_MEMO", f"Memo hit ({len(memo['prices'])} points)")
            return memo["prices"]

        try:
            fresh = self.client.fetch_sol_price_history(from_sec, to_sec)
        except Exception as e:
            if memo:
                debug_log("PRICE_MEMO", f"Fetch failed ({e}) → serving stale memo", True)
                return memo["prices"]
            debug_log("PRICE_MEMO", f"Fetch failed ({e}) and no memo → empty series", True)
            return []

        # leere Serie nicht memoisieren
        if fresh:
            self.store_memo(fresh, from_sec, to_sec)
        return fresh
