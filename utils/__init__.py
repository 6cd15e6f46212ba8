"""Shared utilities package for the Sublite API client"""

from .storage import TokenPair, TokenStore
from .logging_utils import redact_headers, setup_logging

__all__ = [
    "TokenPair",
    "TokenStore",
    "redact_headers",
    "setup_logging",
]
