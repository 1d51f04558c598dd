from __future__ import annotations

from .base import ImageProvider, ProviderError, Subscription
from .fal_provider import FalProvider
from .registry import get_provider

__all__ = [
    "FalProvider",
    "ImageProvider",
    "ProviderError",
    "Subscription",
    "get_provider",
]
