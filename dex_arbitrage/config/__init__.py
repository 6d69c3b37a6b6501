from .loader import load_settings
from .models import Settings
from .registry import Network, Registry, Token, TokenPair, Venue, build_registry

__all__ = [
    "Settings",
    "load_settings",
    "Registry",
    "Network",
    "Venue",
    "Token",
    "TokenPair",
    "build_registry",
]
