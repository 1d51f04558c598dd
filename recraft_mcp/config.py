from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Server configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # fal.ai
    fal_key: Optional[str] = Field(default=None, description="fal.ai API key (FAL_KEY).")
    fal_model: str = Field("fal-ai/recraft/v3/text-to-image", description="Model route on fal.ai.")
    fal_queue_url: str = Field("https://queue.fal.run", description="Base URL of the fal.ai queue API.")

    # Provider selection
    image_provider: str = Field("fal")

    # Downloads
    images_dir: str = Field("images", description="Artifact directory, relative to the working directory.")
    max_concurrent_downloads: int = Field(1, ge=1, le=8)

    # HTTP / polling
    poll_interval_s: float = Field(0.5, ge=0.0)
    http_timeout_s: float = Field(60.0, gt=0.0)

    log_level: str = Field("INFO")

    @property
    def credential_configured(self) -> bool:
        return bool(self.fal_key)

    def resolve_images_dir(self) -> Path:
        """Return the absolute artifact directory for the current working directory."""

        path = Path(self.images_dir)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path.resolve()


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
