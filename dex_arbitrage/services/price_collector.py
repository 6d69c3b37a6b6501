from __future__ import annotations

import logging
import time

from dex_arbitrage.chains.base import QuoteSource
from dex_arbitrage.config.registry import Network, TokenPair
from dex_arbitrage.core.exceptions import QuoteError
from dex_arbitrage.core.units import to_integer, unit_price
from dex_arbitrage.services.schemas import PriceQuote

log = logging.getLogger(__name__)


class PriceCollector:
    """Samples a per-unit price for a pair from every venue of a network.

    Venues are quoted one after another. A failing venue is logged and left
    out of the result; it never aborts the rest of the pair.
    """

    def __init__(self, quote_source: QuoteSource) -> None:
        self._quote_source = quote_source

    async def collect(self, network: Network, pair: TokenPair) -> list[PriceQuote]:
        base_address = pair.base.address_on(network.name)
        quote_address = pair.quote.address_on(network.name)
        if base_address is None or quote_address is None:
            log.info(
                "[%s] Skipping pair %s - tokens not available on this network",
                network.name,
                pair.label,
            )
            return []

        base_decimals = pair.base.decimals_on(network.name)
        quote_decimals = pair.quote.decimals_on(network.name)
        amount_in = to_integer(pair.amount, base_decimals)
        if amount_in <= 0:
            log.warning(
                "[%s] Probe amount %s for %s is below one base unit; skipping",
                network.name,
                pair.amount,
                pair.label,
            )
            return []

        quotes: list[PriceQuote] = []
        for venue in network.venues:
            try:
                amount_out = await self._quote_source.get_amount_out(
                    venue.address,
                    base_address,
                    quote_address,
                    amount_in,
                )
            except QuoteError as exc:
                log.warning("[%s] Error getting %s price from %s: %s", network.name, pair.label, venue.name, exc)
                continue

            if amount_out <= 0:
                log.warning("[%s] Invalid response from %s for %s: %r", network.name, venue.name, pair.label, amount_out)
                continue

            price = unit_price(amount_out, quote_decimals, pair.amount)
            log.info("[%s] %s @ %s: %.6f", network.name, pair.label, venue.name, price)
            quotes.append(PriceQuote(venue=venue.name, price=price, timestamp_ms=int(time.time() * 1000)))

        return quotes
