from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PriceQuote:
    venue: str
    price: float  # quote-token units per one base token
    timestamp_ms: int


@dataclass(slots=True)
class Opportunity:
    network: str
    pair: str
    buy_venue: str
    buy_price: float
    sell_venue: str
    sell_price: float
    spread_pct: float
    timestamp_ms: int
