# sources/helius.py
# Helius-Client – RPC (Supply), Enhanced API (Transaktionen) und Token-Preise

import requests

from core.constants import SOL_MINT, TX_PAGE_SIZE, TX_MAX_PAGES
from sources.backoff import backoff_fetch, json_body, UpstreamError
from utils.log import debug_log


class HeliusClient:
    """
    Ein Client pro Prozess, gebunden an genau einen API-Key.
    Alle Calls laufen über backoff_fetch.
    """

    def __init__(self, settings, session: requests.Session | None = None):
        self.api_key = settings.helius_api_key
        self.rpc_url = settings.helius_rpc_url
        self.enhanced_base = settings.helius_enhanced_base
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}

    # -------------------------
    # RPC: getTokenSupply
    # -------------------------
    def get_token_supply_ui(self, mint: str) -> float:
        payload = {
            "jsonrpc": "2.0",
            "id": "burn-supply",
            "method": "getTokenSupply",
            "params": [mint],
        }
        res = backoff_fetch(
            self.rpc_url,
            method="POST",
            category="HELIUS_RPC",
            session=self.session,
            json=payload,
            headers=self.headers,
        )
        data = json_body(res, "HELIUS_RPC")
        if not isinstance(data, dict):
            raise UpstreamError("[HELIUS_RPC] getTokenSupply returned no JSON object", category="HELIUS_RPC")

        if data.get("error"):
            raise UpstreamError(f"[HELIUS_RPC] getTokenSupply error: {data['error']}", category="HELIUS_RPC")

        try:
            value = data["result"]["value"]
        except (KeyError, TypeError):
            raise UpstreamError("[HELIUS_RPC] getTokenSupply returned no value", category="HELIUS_RPC")
        if not isinstance(value, dict):
            raise UpstreamError("[HELIUS_RPC] getTokenSupply returned no value", category="HELIUS_RPC")

        ui_amount = value.get("uiAmount")
        if isinstance(ui_amount, (int, float)) and not isinstance(ui_amount, bool):
            return float(ui_amount)

        try:
            return float(value.get("uiAmountString"))
        except (TypeError, ValueError):
            raise UpstreamError("[HELIUS_RPC] getTokenSupply returned no usable amount", category="HELIUS_RPC")

    # -------------------------
    # Enhanced API: Transaktionen (paginiert)
    # -------------------------
    def get_all_enhanced_transactions(
        self,
        address: str,
        max_pages: int = TX_MAX_PAGES,
        page_size: int = TX_PAGE_SIZE,
    ) -> list:
        url = f"{self.enhanced_base}/addresses/{address}/transactions"
        all_txs = []
        before = None

        for page in range(max_pages):
            params = {"api-key": self.api_key, "limit": page_size}
            if before:
                params["before"] = before

            res = backoff_fetch(url, category="HELIUS_TXS", session=self.session, params=params)
            batch = json_body(res, "HELIUS_TXS")

            if not isinstance(batch, list) or not batch:
                break
            all_txs.extend(batch)

            last = batch[-1]
            if not isinstance(last, dict) or not last.get("signature") or len(batch) < page_size:
                break
            before = last["signature"]
        else:
            debug_log("HELIUS_TXS", f"Page cap reached ({max_pages} pages, {len(all_txs)} txs) – history truncated")

        return all_txs

    # -------------------------
    # Spot-Preise (0 = unbekannt)
    # -------------------------
    def _fetch_mint_price(self, mint: str, category: str) -> float:
        url = f"{self.enhanced_base}/token-price"
        res = backoff_fetch(
            url,
            method="POST",
            category=category,
            session=self.session,
            params={"api-key": self.api_key},
            json={"mintAddresses": [mint]},
            headers=self.headers,
        )
        data = json_body(res, category)
        entry = data.get(mint) if isinstance(data, dict) else None
        price = (entry or {}).get("price") or 0
        return float(price)

    def fetch_token_price_usd(self, mint: str) -> float:
        try:
            price = self._fetch_mint_price(mint, "HELIUS_PRICE")
            if price > 0:
                debug_log("HELIUS_PRICE", f"Token {mint} price fetched: ${price:.10f}")
                return price
            raise ValueError("Price not found or zero.")
        except Exception as e:
            debug_log("HELIUS_PRICE", f"Failed to fetch price for {mint}: {e}", True)
            return 0.0

    def fetch_sol_price_usd(self) -> float:
        try:
            price = self._fetch_mint_price(SOL_MINT, "HELIUS_SOL_PRICE")
            if price > 0:
                debug_log("HELIUS_SOL_PRICE", f"Current SOL price fetched: ${price:.2f}")
                return price
            raise ValueError("SOL price not found or zero.")
        except Exception as e:
            debug_log("HELIUS_SOL_PRICE", f"Failed to fetch SOL price: {e}", True)
            return 0.0
