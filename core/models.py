# core/models.py
# Kleine, unveränderliche Werte zwischen Upstream und Ableitungen

from typing import NamedTuple


class Receipt(NamedTuple):
    """Inbound SOL transfer to the tracked wallet."""
    lamports: int      # arbitrary precision, never float
    timestamp: int | None  # seconds, None when the tx carries none


class PricePoint(NamedTuple):
    t_ms: int
    price_usd: float
