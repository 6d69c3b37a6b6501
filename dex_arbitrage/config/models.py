from __future__ import annotations

import re
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, field_validator, model_validator

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class NetworkConfig(BaseModel):
    rpc_url: str = Field(min_length=1)
    # venue name -> router address; insertion order is the quoting order
    venues: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True

    @field_validator("venues")
    @classmethod
    def _check_venue_addresses(cls, venues: dict[str, str]) -> dict[str, str]:
        for name, address in venues.items():
            _require_address(address, f"venue {name!r}")
        return venues


class TokenConfig(BaseModel):
    decimals: int = Field(ge=0, le=77)
    addresses: dict[str, str] = Field(default_factory=dict)
    decimals_overrides: dict[str, int] = Field(default_factory=dict)

    @field_validator("addresses")
    @classmethod
    def _check_addresses(cls, addresses: dict[str, str]) -> dict[str, str]:
        for network, address in addresses.items():
            _require_address(address, f"token address on {network!r}")
        return addresses

    @field_validator("decimals_overrides")
    @classmethod
    def _check_overrides(cls, overrides: dict[str, int]) -> dict[str, int]:
        for network, decimals in overrides.items():
            if not 0 <= decimals <= 77:
                raise ValueError(f"decimals override on {network!r} out of range: {decimals}")
        return overrides


class PairConfig(BaseModel):
    base: str = Field(min_length=1)
    quote: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    networks: list[str] | None = None

    @model_validator(mode="after")
    def _check_distinct(self) -> "PairConfig":
        if self.base == self.quote:
            raise ValueError(f"pair base and quote must differ: {self.base}")
        return self


class ThresholdsConfig(BaseModel):
    min_spread_pct: float = Field(default=0.5, ge=0.0)


class ScannerConfig(BaseModel):
    interval_ms: PositiveInt = Field(default=45000)
    quote_timeout_sec: PositiveFloat = Field(default=10.0)


class TelegramConfig(BaseModel):
    enabled: bool = True
    bot_token: str = Field(default="")
    chat_id: str = Field(default="")
    parse_mode: str | None = Field(default="Markdown")
    cooldown_ms: int = Field(default=2000, ge=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level: str = Field(default="INFO")
    json_format: bool = Field(default=False, alias="json")
    directory: str = Field(default="logs")
    to_file: bool = True


class Settings(BaseModel):
    networks: dict[str, NetworkConfig] = Field(default_factory=dict)
    tokens: dict[str, TokenConfig] = Field(default_factory=dict)
    pairs: list[PairConfig] = Field(default_factory=list)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _check_telegram_credentials(self) -> "Settings":
        telegram = self.telegram
        if telegram.enabled:
            token = telegram.bot_token.strip()
            if not token or token == "<YOUR_TOKEN>":
                raise ValueError("telegram.bot_token is required when telegram is enabled")
            if not telegram.chat_id.strip():
                raise ValueError("telegram.chat_id is required when telegram is enabled")
        return self


def _require_address(address: str, what: str) -> None:
    if not re.match(ADDRESS_PATTERN, address):
        raise ValueError(f"{what} is not a valid address: {address!r}")
