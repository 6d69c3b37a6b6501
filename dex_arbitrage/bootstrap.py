from __future__ import annotations

from dex_arbitrage.chains.router import RouterQuoteSource
from dex_arbitrage.config import Registry, Settings, build_registry, load_settings
from dex_arbitrage.config.registry import Network
from dex_arbitrage.core.app_runner import AppRunner
from dex_arbitrage.core.exceptions import ConfigurationError
from dex_arbitrage.core.logging import configure_logging
from dex_arbitrage.services.notifier import AlertSink, LogAlertSink, Notifier, TelegramAlertSink
from dex_arbitrage.services.opportunity_detector import OpportunityDetector
from dex_arbitrage.services.scanner import ScannerOrchestrator, build_pipelines


def create_alert_sink(settings: Settings) -> AlertSink:
    if settings.telegram.enabled:
        return TelegramAlertSink(settings.telegram)
    return LogAlertSink()


def build_app_components(config_path: str | None = None) -> tuple[
    Settings,
    Registry,
    ScannerOrchestrator,
    Notifier,
    AppRunner,
]:
    settings = load_settings(config_path)
    configure_logging(settings.logging)

    registry = build_registry(settings)
    timeout = settings.scanner.quote_timeout_sec

    def quote_source_factory(network: Network) -> RouterQuoteSource:
        return RouterQuoteSource(network, timeout=timeout)

    detector = OpportunityDetector(settings.thresholds.min_spread_pct)
    pipelines = build_pipelines(registry, quote_source_factory, detector)
    if not pipelines:
        raise ConfigurationError("No network scanner could be initialized")

    notifier = Notifier(create_alert_sink(settings), cooldown_ms=settings.telegram.cooldown_ms)
    orchestrator = ScannerOrchestrator(pipelines, notifier)
    runner = AppRunner(orchestrator, interval_sec=settings.scanner.interval_ms / 1000)

    return settings, registry, orchestrator, notifier, runner
