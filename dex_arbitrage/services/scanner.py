from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from dex_arbitrage.chains.base import QuoteSource
from dex_arbitrage.config.registry import Network, Registry, TokenPair
from dex_arbitrage.core.exceptions import PipelineError
from dex_arbitrage.services.notifier import Notifier
from dex_arbitrage.services.opportunity_detector import OpportunityDetector
from dex_arbitrage.services.price_collector import PriceCollector
from dex_arbitrage.services.schemas import Opportunity

log = logging.getLogger(__name__)

QuoteSourceFactory = Callable[[Network], QuoteSource]


class NetworkPipeline:
    """Collector and detector for a single network.

    Holds no state between cycles besides its configuration.
    """

    def __init__(
        self,
        network: Network,
        pairs: Sequence[TokenPair],
        quote_source: QuoteSource,
        detector: OpportunityDetector,
    ) -> None:
        self.network = network
        self.pairs = list(pairs)
        self.quote_source = quote_source
        self._collector = PriceCollector(quote_source)
        self._detector = detector

    async def scan(self) -> list[Opportunity]:
        if not self.pairs:
            log.info("[%s] No token pairs configured for this network", self.network.name)
            return []

        opportunities: list[Opportunity] = []
        for pair in self.pairs:
            try:
                quotes = await self._collector.collect(self.network, pair)
            except Exception as exc:
                raise PipelineError(f"{pair.label} scan failed: {exc}") from exc
            opportunity = self._detector.detect(self.network, pair, quotes)
            if opportunity is not None:
                opportunities.append(opportunity)

        if opportunities:
            log.info("[%s] Found %d arbitrage opportunities", self.network.name, len(opportunities))
        else:
            log.info("[%s] No arbitrage opportunities found", self.network.name)
        return opportunities

    async def close(self) -> None:
        await self.quote_source.close()


def build_pipelines(
    registry: Registry,
    quote_source_factory: QuoteSourceFactory,
    detector: OpportunityDetector,
) -> list[NetworkPipeline]:
    """One pipeline per network; a network that fails to initialize is left out."""
    pipelines: list[NetworkPipeline] = []
    for network in registry.networks:
        try:
            quote_source = quote_source_factory(network)
        except Exception:
            log.exception("Failed to initialize %s scanner", network.name)
            continue
        pipelines.append(NetworkPipeline(network, registry.pairs_for(network), quote_source, detector))
        log.info("Initialized %s scanner successfully", network.name)
    return pipelines


class ScannerOrchestrator:
    def __init__(self, pipelines: Sequence[NetworkPipeline], notifier: Notifier) -> None:
        self._pipelines = list(pipelines)
        self._notifier = notifier

    @property
    def pipelines(self) -> list[NetworkPipeline]:
        return list(self._pipelines)

    async def run_cycle(self) -> list[Opportunity]:
        """Scan every network concurrently, then notify sequentially."""
        results = await asyncio.gather(
            *(pipeline.scan() for pipeline in self._pipelines),
            return_exceptions=True,
        )

        opportunities: list[Opportunity] = []
        for pipeline, result in zip(self._pipelines, results, strict=True):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                log.error(
                    "[%s] Error during scan: %s",
                    pipeline.network.name,
                    result,
                    exc_info=(type(result), result, result.__traceback__),
                )
                continue
            opportunities.extend(result)

        # largest spread first
        opportunities.sort(key=lambda item: item.spread_pct, reverse=True)

        for opportunity in opportunities:
            await self._notifier.notify(opportunity)

        log.info(
            "Scan cycle finished: %d networks, %d opportunities",
            len(self._pipelines),
            len(opportunities),
        )
        return opportunities

    async def close(self) -> None:
        await asyncio.gather(*(pipeline.close() for pipeline in self._pipelines), return_exceptions=True)
