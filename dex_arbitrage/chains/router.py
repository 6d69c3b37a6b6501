from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import Web3Exception

from dex_arbitrage.config.registry import Network
from dex_arbitrage.core.exceptions import QuoteError

log = logging.getLogger(__name__)

# Uniswap V2 style router, only the read-only quoting call.
ROUTER_ABI: list[dict[str, Any]] = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
    }
]


class RouterQuoteSource:
    """Quotes swaps through ``getAmountsOut`` on V2-compatible routers of one network."""

    def __init__(self, network: Network, timeout: float = 10.0, web3: Any | None = None) -> None:
        self.network = network.name
        self._timeout = timeout
        if web3 is None:
            web3 = AsyncWeb3(
                AsyncHTTPProvider(
                    network.rpc_url,
                    request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
                )
            )
        self._web3 = web3
        self._routers: dict[str, Any] = {}

    def _router(self, venue_address: str) -> Any:
        address = Web3.to_checksum_address(venue_address)
        router = self._routers.get(address)
        if router is None:
            router = self._web3.eth.contract(address=address, abi=ROUTER_ABI)
            self._routers[address] = router
        return router

    async def get_amount_out(self, venue_address: str, token_in: str, token_out: str, amount_in: int) -> int:
        if amount_in <= 0:
            raise QuoteError(f"amount_in must be positive, got {amount_in}")
        try:
            router = self._router(venue_address)
            path = [Web3.to_checksum_address(token_in), Web3.to_checksum_address(token_out)]
            call = router.functions.getAmountsOut(amount_in, path).call()
            amounts = await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise QuoteError(f"[{self.network}] quote timed out after {self._timeout:.1f}s") from exc
        except (Web3Exception, aiohttp.ClientError, OSError, ValueError) as exc:
            raise QuoteError(f"[{self.network}] quote call failed: {exc}") from exc

        return self._parse_amounts(amounts)

    def _parse_amounts(self, amounts: Sequence[int] | None) -> int:
        if not amounts or len(amounts) < 2:
            raise QuoteError(f"[{self.network}] invalid getAmountsOut response: {amounts!r}")
        amount_out = amounts[-1]
        if not isinstance(amount_out, int) or amount_out <= 0:
            raise QuoteError(f"[{self.network}] non-positive output amount: {amount_out!r}")
        return amount_out

    async def close(self) -> None:
        provider = getattr(self._web3, "provider", None)
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is None:
            return
        try:
            await disconnect()
        except (aiohttp.ClientError, OSError) as exc:
            log.debug("[%s] Error closing RPC provider: %s", self.network, exc)
