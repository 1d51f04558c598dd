from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CONTENT_TYPE = "image/png"


class RemoteArtifact(BaseModel):
    """A single generated image as returned by the provider."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str
    content_type: str = DEFAULT_CONTENT_TYPE
    file_size: int | None = None
    file_name: str | None = None  # informational only, never used locally

    @field_validator("content_type", mode="before")
    @classmethod
    def _default_content_type(cls, value: Any) -> Any:
        return value or DEFAULT_CONTENT_TYPE


class GenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    images: list[RemoteArtifact] = Field(..., min_length=1)
    seed: int | None = None  # None means the provider picked one and did not echo it


class ProviderResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_id: str
    data: GenerationResult


class MaterializedArtifact(BaseModel):
    """Local record of one remote artifact after a download attempt."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    remote: RemoteArtifact
    filename: str
    local_path: Path | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "MaterializedArtifact":
        if (self.local_path is None) == (self.error is None):
            raise ValueError("exactly one of local_path or error must be set")
        return self

    @property
    def downloaded(self) -> bool:
        return self.local_path is not None

    @property
    def url(self) -> str:
        return self.remote.url
