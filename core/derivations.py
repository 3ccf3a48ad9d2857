"""
Ableitungen über Upstream-Antworten – reine Funktionen, kein I/O.

- Burn-Statistik aus der aktuellen Supply
- SOL-Receipts der Wallet (Lamports als int, nie float summieren)
- USD-Bewertung über den nächstgelegenen historischen Preis
- Token-Käufe aus der konfigurierten Purchase-Source
"""

import math
from decimal import Decimal

from core.constants import LAMPORTS_PER_SOL
from core.models import Receipt, PricePoint


def compute_burn(current_supply: float, total_supply: float) -> dict:
    burned = total_supply - current_supply
    return {
        "burnedAmount": burned,
        "currentSupply": current_supply,
        "burnedPercent": (burned / total_supply) * 100,
    }


def lamports_to_sol(lamports: int) -> float:
    # exakt teilen, erst das Ergebnis wird float
    return float(Decimal(lamports) / Decimal(LAMPORTS_PER_SOL))


def _parse_lamports(raw) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def _parse_timestamp(raw) -> int | None:
    if not isinstance(raw, (int, float)) or isinstance(raw, bool):
        return None
    return int(raw)


def extract_receipts(transactions, wallet: str) -> tuple[list[Receipt], float]:
    receipts = []
    total_lamports = 0

    for tx in transactions:
        ts = _parse_timestamp(tx.get("timestamp"))
        for nt in tx.get("nativeTransfers") or []:
            if nt.get("toUserAccount") != wallet:
                continue
            lamports = _parse_lamports(nt.get("amount"))
            if lamports is None or lamports <= 0:
                continue
            total_lamports += lamports
            receipts.append(Receipt(lamports, ts))

    return receipts, lamports_to_sol(total_lamports)


def nearest_price_usd(series: list[PricePoint], target_ms: int) -> float:
    """First point wins on equal distance. O(n), series is bounded by the window."""
    best = series[0].price_usd
    best_diff = abs(target_ms - series[0].t_ms)
    for point in series[1:]:
        diff = abs(target_ms - point.t_ms)
        if diff < best_diff:
            best_diff = diff
            best = point.price_usd
    return best


def compute_lifetime_usd(receipts: list[Receipt], series: list[PricePoint]) -> float:
    if not receipts or not series:
        return 0.0

    total_usd = 0.0
    for r in receipts:
        # zählt in ctoFeesSol, ist aber ohne Zeitpunkt nicht bewertbar
        if r.timestamp is None:
            continue
        price = nearest_price_usd(series, r.timestamp * 1000)
        total_usd += lamports_to_sol(r.lamports) * price
    return total_usd


def compute_token_flows(transactions, wallet: str, mint: str, purchase_source: str) -> dict:
    purchased_from_source = 0.0

    for tx in transactions:
        for tt in tx.get("tokenTransfers") or []:
            if tt.get("mint") != mint:
                continue
            if tt.get("toUserAccount") != wallet:
                continue

            raw = tt.get("tokenAmount")
            try:
                amount = 0.0 if raw is None else float(raw)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(amount) or amount <= 0:
                continue

            source = tt.get("fromUserAccount") or ""
            if source and source == purchase_source:
                purchased_from_source += amount

    return {"purchasedFromSource": purchased_from_source}
