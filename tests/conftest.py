from __future__ import annotations

from decimal import Decimal

import pytest

from dex_arbitrage.config.registry import Network, Token, TokenPair, Venue

from .fakes import QUICKSWAP, SUSHI_POLYGON, SUSHISWAP, UNISWAP, USDC_ETH, USDC_POLYGON, WETH_ETH, WETH_POLYGON


@pytest.fixture
def weth() -> Token:
    return Token(symbol="WETH", decimals=18, addresses={"ethereum": WETH_ETH, "polygon": WETH_POLYGON})


@pytest.fixture
def usdc() -> Token:
    return Token(symbol="USDC", decimals=6, addresses={"ethereum": USDC_ETH, "polygon": USDC_POLYGON})


@pytest.fixture
def weth_usdc(weth: Token, usdc: Token) -> TokenPair:
    return TokenPair(base=weth, quote=usdc, amount=Decimal("1"))


@pytest.fixture
def ethereum() -> Network:
    return Network(
        name="ethereum",
        rpc_url="https://rpc.example/ethereum",
        venues=(Venue("uniswapV2", UNISWAP), Venue("sushiswap", SUSHISWAP)),
    )


@pytest.fixture
def polygon() -> Network:
    return Network(
        name="polygon",
        rpc_url="https://rpc.example/polygon",
        venues=(Venue("quickswap", QUICKSWAP), Venue("sushiswap", SUSHI_POLYGON)),
    )
