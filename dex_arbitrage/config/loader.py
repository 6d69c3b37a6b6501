from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from dex_arbitrage.core.exceptions import ConfigurationError

from .models import Settings

DEFAULT_CONFIG_PATHS = (
    Path("config.yaml"),
    Path("config/config.yaml"),
    Path("config/config.example.yaml"),
)

# environment variable -> (section, key)
ENV_OVERRIDES = {
    "TELEGRAM_BOT_TOKEN": ("telegram", "bot_token"),
    "TELEGRAM_CHAT_ID": ("telegram", "chat_id"),
}


def load_settings(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> Settings:
    """Load settings from provided path, optionally apply overrides, and return validated Settings.

    ``${VAR}`` placeholders in the file are expanded from the environment
    (after loading a ``.env`` file, if present).
    """
    load_dotenv()
    data: dict[str, Any] = {}

    candidates = [Path(path)] if path else list(DEFAULT_CONFIG_PATHS)
    for candidate in candidates:
        if candidate.exists():
            data = _read_yaml(candidate)
            break
    else:
        if path:
            raise ConfigurationError(f"Config file not found: {path}")

    _apply_env_overrides(data)

    if overrides:
        data.update(overrides)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        text = os.path.expandvars(fp.read())
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return data


def _apply_env_overrides(data: dict[str, Any]) -> None:
    for variable, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(variable)
        if not value:
            continue
        block = data.setdefault(section, {}) or {}
        data[section] = block
        if not block.get(key):
            block[key] = value
