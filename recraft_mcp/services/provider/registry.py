from __future__ import annotations

from recraft_mcp.config import Settings

from .base import ImageProvider
from .fal_provider import FalProvider

_PROVIDERS: dict[str, type[FalProvider]] = {
    "fal": FalProvider,
}


def get_provider(settings: Settings) -> ImageProvider:
    provider_key = settings.image_provider.lower()
    if provider_key not in _PROVIDERS:
        raise ValueError(f"Unsupported image provider: {provider_key}")
    return _PROVIDERS[provider_key].from_settings(settings)
