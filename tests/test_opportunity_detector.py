from __future__ import annotations

import math

import pytest

from dex_arbitrage.config.registry import Network, TokenPair
from dex_arbitrage.services.opportunity_detector import OpportunityDetector, spread_percent
from dex_arbitrage.services.schemas import PriceQuote


def _quotes(*prices: tuple[str, float]) -> list[PriceQuote]:
    return [PriceQuote(venue=venue, price=price, timestamp_ms=0) for venue, price in prices]


def test_detects_scenario_above_threshold(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=0.5)
    opportunity = detector.detect(ethereum, weth_usdc, _quotes(("venueA", 3000.0), ("venueB", 3020.0)))

    assert opportunity is not None
    assert opportunity.network == "ethereum"
    assert opportunity.pair == "WETH/USDC"
    assert opportunity.buy_venue == "venueA"
    assert opportunity.buy_price == 3000.0
    assert opportunity.sell_venue == "venueB"
    assert opportunity.sell_price == 3020.0
    assert opportunity.spread_pct == pytest.approx(20.0 / 3000.0 * 100.0)
    assert f"{opportunity.spread_pct:.2f}" == "0.67"


def test_scenario_below_higher_threshold(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=1.0)
    assert detector.detect(ethereum, weth_usdc, _quotes(("venueA", 3000.0), ("venueB", 3020.0))) is None


@pytest.mark.parametrize(
    "quotes",
    [
        [],
        [("venueA", 3000.0)],
        [("venueA", 3000.0), ("venueB", 0.0)],
        [("venueA", 3000.0), ("venueB", -5.0)],
        [("venueA", math.nan), ("venueB", 3100.0)],
    ],
)
def test_fewer_than_two_valid_quotes_yield_nothing(
    ethereum: Network, weth_usdc: TokenPair, quotes: list[tuple[str, float]]
) -> None:
    detector = OpportunityDetector(min_spread_pct=0.0)
    assert detector.detect(ethereum, weth_usdc, _quotes(*quotes)) is None


def test_threshold_is_inclusive(ethereum: Network, weth_usdc: TokenPair) -> None:
    threshold = spread_percent(100.0, 100.5)
    detector = OpportunityDetector(min_spread_pct=threshold)

    opportunity = detector.detect(ethereum, weth_usdc, _quotes(("a", 100.0), ("b", 100.5)))

    assert opportunity is not None
    assert opportunity.spread_pct == threshold


def test_spread_uses_only_valid_quotes_and_extremes(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=0.0)
    quotes = _quotes(("a", 2990.0), ("broken", 0.0), ("b", 3050.0), ("c", 3010.0), ("d", math.inf))

    opportunity = detector.detect(ethereum, weth_usdc, quotes)

    assert opportunity is not None
    assert (opportunity.buy_venue, opportunity.sell_venue) == ("a", "b")
    assert opportunity.spread_pct == pytest.approx((3050.0 - 2990.0) / 2990.0 * 100.0)


def test_ties_buy_first_cheapest_and_sell_last_dearest(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=0.0)
    quotes = _quotes(("a", 3000.0), ("b", 3000.0), ("c", 3030.0), ("d", 3030.0))

    opportunity = detector.detect(ethereum, weth_usdc, quotes)

    assert opportunity is not None
    assert opportunity.buy_venue == "a"
    assert opportunity.sell_venue == "d"
    assert opportunity.spread_pct == pytest.approx(1.0)


def test_identical_prices_emit_zero_spread_at_zero_threshold(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=0.0)

    opportunity = detector.detect(ethereum, weth_usdc, _quotes(("a", 3000.0), ("b", 3000.0), ("c", 3000.0)))

    assert opportunity is not None
    assert (opportunity.buy_venue, opportunity.sell_venue) == ("a", "c")
    assert opportunity.spread_pct == 0.0


def test_identical_prices_below_positive_threshold(ethereum: Network, weth_usdc: TokenPair) -> None:
    detector = OpportunityDetector(min_spread_pct=0.5)
    assert detector.detect(ethereum, weth_usdc, _quotes(("a", 3000.0), ("b", 3000.0))) is None


def test_negative_threshold_rejected() -> None:
    with pytest.raises(ValueError):
        OpportunityDetector(min_spread_pct=-1.0)


def test_threshold_is_exposed() -> None:
    assert OpportunityDetector(min_spread_pct=1.25).min_spread_pct == 1.25
