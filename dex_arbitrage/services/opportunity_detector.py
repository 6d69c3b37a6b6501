from __future__ import annotations

import logging
import math
import time
from typing import Sequence

from dex_arbitrage.config.registry import Network, TokenPair
from dex_arbitrage.services.schemas import Opportunity, PriceQuote

log = logging.getLogger(__name__)


def spread_percent(buy_price: float, sell_price: float) -> float:
    """Spread of ``sell_price`` over ``buy_price``, relative to the buy side."""
    return (sell_price - buy_price) / buy_price * 100.0


class OpportunityDetector:
    def __init__(self, min_spread_pct: float = 0.5) -> None:
        if min_spread_pct < 0:
            raise ValueError("min_spread_pct must be non-negative")
        self._min_spread_pct = min_spread_pct

    @property
    def min_spread_pct(self) -> float:
        return self._min_spread_pct

    def detect(self, network: Network, pair: TokenPair, quotes: Sequence[PriceQuote]) -> Opportunity | None:
        """Compare the cheapest and the most expensive venue for a pair.

        Only positive, finite prices take part. On ties the buy side is the
        first cheapest venue and the sell side the last most expensive one, so
        two distinct venues are always compared. Returns ``None`` when fewer
        than two valid quotes exist or the spread is below the threshold.
        """
        valid = [quote for quote in quotes if math.isfinite(quote.price) and quote.price > 0]
        if len(valid) < 2:
            log.debug("[%s] %s: %d valid quote(s), need at least 2", network.name, pair.label, len(valid))
            return None

        lowest = min(valid, key=lambda quote: quote.price)
        highest = max(reversed(valid), key=lambda quote: quote.price)

        spread = spread_percent(lowest.price, highest.price)
        if spread < self._min_spread_pct:
            log.debug(
                "[%s] %s spread %.4f%% below threshold %.4f%%",
                network.name,
                pair.label,
                spread,
                self._min_spread_pct,
            )
            return None

        log.info(
            "[%s] %s opportunity: buy %s@%.6f -> sell %s@%.6f (%.2f%%)",
            network.name,
            pair.label,
            lowest.venue,
            lowest.price,
            highest.venue,
            highest.price,
            spread,
        )
        return Opportunity(
            network=network.name,
            pair=pair.label,
            buy_venue=lowest.venue,
            buy_price=lowest.price,
            sell_venue=highest.venue,
            sell_price=highest.price,
            spread_pct=spread,
            timestamp_ms=int(time.time() * 1000),
        )
