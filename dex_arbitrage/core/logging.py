from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

from dex_arbitrage.config.models import LoggingConfig

_MAX_LOG_SIZE = 10 * 1024 * 1024
_BACKUP_COUNT = 5
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# logger name -> log file
_COMPONENT_LOGS = {
    "dex_arbitrage.system": "system.log",
    "dex_arbitrage.chains.router": "quotes.log",
    "dex_arbitrage.services.price_collector": "price_collector.log",
    "dex_arbitrage.services.opportunity_detector": "opportunity_detector.log",
    "dex_arbitrage.services.scanner": "scanner.log",
    "dex_arbitrage.services.notifier": "notifier.log",
    "dex_arbitrage.core.app_runner": "app_runner.log",
}


def _create_file_handler(log_file: Path, level: str, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        log_file,
        maxBytes=_MAX_LOG_SIZE,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _setup_logger(
    logger_name: str,
    log_file: str,
    level: str,
    logs_dir: Path | None,
    formatter: logging.Formatter,
) -> logging.Logger:
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logs_dir is not None:
        logger.addHandler(_create_file_handler(logs_dir / log_file, level, formatter))

    return logger


def configure_logging(config: LoggingConfig) -> None:
    shared_processors: list[structlog.types.Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if config.json_format:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(config.level)),
        cache_logger_on_first_use=True,
    )

    # stdlib records go through the same processors when JSON output is requested
    formatter: logging.Formatter
    if config.json_format:
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=[structlog.stdlib.add_logger_name] + shared_processors,
        )
    else:
        formatter = logging.Formatter(_FORMAT)

    logs_dir: Path | None = None
    if config.to_file:
        logs_dir = Path(config.directory)
        logs_dir.mkdir(parents=True, exist_ok=True)

    level = config.level
    for logger_name, log_file in _COMPONENT_LOGS.items():
        _setup_logger(logger_name, log_file, level, logs_dir, formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not any(isinstance(handler, logging.StreamHandler) for handler in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
