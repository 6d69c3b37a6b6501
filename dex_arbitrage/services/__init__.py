from .notifier import LogAlertSink, NotificationState, Notifier, TelegramAlertSink, format_opportunity
from .opportunity_detector import OpportunityDetector
from .price_collector import PriceCollector
from .scanner import NetworkPipeline, ScannerOrchestrator, build_pipelines

__all__ = [
    "PriceCollector",
    "OpportunityDetector",
    "Notifier",
    "NotificationState",
    "TelegramAlertSink",
    "LogAlertSink",
    "format_opportunity",
    "NetworkPipeline",
    "ScannerOrchestrator",
    "build_pipelines",
]
