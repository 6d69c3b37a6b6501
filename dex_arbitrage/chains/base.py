from __future__ import annotations

from typing import Protocol


class QuoteSource(Protocol):
    """Read-only price quoting for one network.

    ``get_amount_out`` returns the output amount, in the smallest unit of
    ``token_out``, for swapping ``amount_in`` smallest units of ``token_in``
    through the router at ``venue_address``. Any failure is raised as
    :class:`~dex_arbitrage.core.exceptions.QuoteError`.
    """

    network: str

    async def get_amount_out(self, venue_address: str, token_in: str, token_out: str, amount_in: int) -> int:
        ...

    async def close(self) -> None:
        ...
