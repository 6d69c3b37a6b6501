from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from dex_arbitrage.config.models import LoggingConfig
from dex_arbitrage.core.logging import _COMPONENT_LOGS, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    for name in _COMPONENT_LOGS:
        component = logging.getLogger(name)
        for handler in list(component.handlers):
            component.removeHandler(handler)
            handler.close()
        component.propagate = True
        component.setLevel(logging.NOTSET)
    for handler in list(root.handlers):
        if handler not in root_handlers:
            root.removeHandler(handler)
    root.setLevel(root_level)


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def test_configure_logging_creates_component_files(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    config = LoggingConfig.model_validate({"level": "DEBUG", "directory": str(logs_dir)})

    configure_logging(config)
    logger = logging.getLogger("dex_arbitrage.services.scanner")
    logger.info("scan finished")
    _flush(logger)

    assert config.json_format is False
    assert (logs_dir / "scanner.log").read_text(encoding="utf-8").strip().endswith("scan finished")
    assert logger.propagate is False


def test_json_format_writes_json_lines(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    config = LoggingConfig.model_validate({"level": "INFO", "json": True, "directory": str(logs_dir)})

    configure_logging(config)
    logger = logging.getLogger("dex_arbitrage.services.scanner")
    logger.info("[%s] Found %d arbitrage opportunities", "ethereum", 2)
    _flush(logger)

    line = (logs_dir / "scanner.log").read_text(encoding="utf-8").strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "[ethereum] Found 2 arbitrage opportunities"
    assert record["level"] == "info"
    assert record["logger"] == "dex_arbitrage.services.scanner"
    assert "timestamp" in record


def test_configure_logging_without_files(tmp_path: Path) -> None:
    config = LoggingConfig(to_file=False, directory=str(tmp_path / "unused"))

    configure_logging(config)

    assert not (tmp_path / "unused").exists()
