"""Domain port definitions for adapters."""

from __future__ import annotations

from .direct_api import DirectApi
from .resolution import EntityResolver, MessageValidator

__all__ = [
    "DirectApi",
    "EntityResolver",
    "MessageValidator",
]
