from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from dex_arbitrage.config.models import Settings
from dex_arbitrage.core.exceptions import ConfigurationError

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Venue:
    name: str
    address: str


@dataclass(frozen=True, slots=True)
class Network:
    name: str
    rpc_url: str
    venues: tuple[Venue, ...]


@dataclass(frozen=True, slots=True)
class Token:
    symbol: str
    decimals: int
    addresses: Mapping[str, str] = field(default_factory=dict)
    decimals_overrides: Mapping[str, int] = field(default_factory=dict)

    def address_on(self, network: str) -> str | None:
        return self.addresses.get(network)

    def decimals_on(self, network: str) -> int:
        return self.decimals_overrides.get(network, self.decimals)


@dataclass(frozen=True, slots=True)
class TokenPair:
    base: Token
    quote: Token
    amount: Decimal
    networks: frozenset[str] | None = None

    @property
    def label(self) -> str:
        return f"{self.base.symbol}/{self.quote.symbol}"

    def available_on(self, network: str) -> bool:
        if self.networks is not None and network not in self.networks:
            return False
        return self.base.address_on(network) is not None and self.quote.address_on(network) is not None


@dataclass(frozen=True, slots=True)
class Registry:
    """Validated view of the configured networks, tokens and pairs."""

    networks: tuple[Network, ...]
    tokens: Mapping[str, Token]
    pairs: tuple[TokenPair, ...]

    def network(self, name: str) -> Network:
        for network in self.networks:
            if network.name == name:
                return network
        raise KeyError(name)

    def pairs_for(self, network: Network) -> list[TokenPair]:
        """Pairs whose tokens both exist on ``network``, in configured order."""
        result: list[TokenPair] = []
        for pair in self.pairs:
            if pair.networks is not None and network.name not in pair.networks:
                continue
            if not pair.available_on(network.name):
                log.info(
                    "[%s] Skipping pair %s - tokens not available on this network",
                    network.name,
                    pair.label,
                )
                continue
            result.append(pair)
        return result


def build_registry(settings: Settings) -> Registry:
    """Build the registry, failing fast on references to unknown entries."""
    networks: list[Network] = []
    for name, config in settings.networks.items():
        if not config.enabled:
            log.info("Network %s disabled in configuration", name)
            continue
        if "${" in config.rpc_url:
            raise ConfigurationError(f"Unresolved environment variable in rpc_url for network {name!r}")
        if not config.venues:
            log.warning("Network %s has no venues configured", name)
        venues = tuple(Venue(name=venue, address=address) for venue, address in config.venues.items())
        networks.append(Network(name=name, rpc_url=config.rpc_url, venues=venues))

    if not networks:
        raise ConfigurationError("No enabled networks configured")

    tokens = {
        symbol: Token(
            symbol=symbol,
            decimals=config.decimals,
            addresses=dict(config.addresses),
            decimals_overrides=dict(config.decimals_overrides),
        )
        for symbol, config in settings.tokens.items()
    }

    known_networks = set(settings.networks)
    pairs: list[TokenPair] = []
    for index, pair in enumerate(settings.pairs):
        missing = [symbol for symbol in (pair.base, pair.quote) if symbol not in tokens]
        if missing:
            raise ConfigurationError(f"pairs[{index}] references unknown token(s): {', '.join(missing)}")
        restricted: frozenset[str] | None = None
        if pair.networks is not None:
            unknown = sorted(set(pair.networks) - known_networks)
            if unknown:
                raise ConfigurationError(f"pairs[{index}] references unknown network(s): {', '.join(unknown)}")
            restricted = frozenset(pair.networks)
        pairs.append(
            TokenPair(
                base=tokens[pair.base],
                quote=tokens[pair.quote],
                amount=pair.amount,
                networks=restricted,
            )
        )

    if not pairs:
        raise ConfigurationError("No token pairs configured")

    return Registry(networks=tuple(networks), tokens=tokens, pairs=tuple(pairs))
