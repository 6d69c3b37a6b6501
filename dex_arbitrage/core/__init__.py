from .exceptions import ConfigurationError, NotificationError, PipelineError, QuoteError, ScannerError
from .logging import configure_logging
from .units import from_integer, to_integer

__all__ = [
    "configure_logging",
    "from_integer",
    "to_integer",
    "ScannerError",
    "ConfigurationError",
    "QuoteError",
    "PipelineError",
    "NotificationError",
]
