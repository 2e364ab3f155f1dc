"""Core configuration and security helpers."""

from .config import Settings, settings
from .logging import configure_logging
from .nonces import NonceManager
from .security import create_access_token, decode_token

__all__ = [
    "Settings",
    "settings",
    "configure_logging",
    "NonceManager",
    "create_access_token",
    "decode_token",
]
