class ScannerError(Exception):
    """Base error for the arbitrage scanner."""


class ConfigurationError(ScannerError):
    """Raised when the configuration is invalid or incomplete."""


class QuoteError(ScannerError):
    """Raised when a venue fails to return a usable quote."""


class PipelineError(ScannerError):
    """Raised when a network pipeline cannot complete its scan."""


class NotificationError(ScannerError):
    """Raised when an alert sink fails to deliver a message."""
