from .base import QuoteSource
from .router import ROUTER_ABI, RouterQuoteSource

__all__ = ["QuoteSource", "RouterQuoteSource", "ROUTER_ABI"]
