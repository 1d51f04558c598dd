from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

ImageSizeName = Literal[
    "1024x1024",
    "1365x1024",
    "1024x1365",
    "1536x1024",
    "1024x1536",
    "1820x1024",
    "1024x1820",
    "1024x2048",
    "2048x1024",
    "1434x1024",
    "1024x1434",
    "1024x1280",
    "1280x1024",
    "1024x1707",
]

Style = Literal[
    "any",
    "realistic_image",
    "digital_illustration",
    "vector_illustration",
    "realistic_image/b_and_w",
    "realistic_image/hard_flash",
    "realistic_image/hdr",
    "realistic_image/natural_light",
    "realistic_image/studio_portrait",
    "realistic_image/enterprise",
    "realistic_image/motion_blur",
    "digital_illustration/pixel_art",
    "digital_illustration/hand_drawn",
    "digital_illustration/grain",
    "digital_illustration/infantile_sketch",
    "digital_illustration/2d_art_poster",
    "digital_illustration/handmade_3d",
    "digital_illustration/hand_drawn_outline",
    "digital_illustration/engraving_color",
    "digital_illustration/2d_art_poster_2",
    "vector_illustration/engraving_bw",
    "vector_illustration/line_art",
    "vector_illustration/line_circuit",
    "vector_illustration/linocut",
]


class CustomImageSize(BaseModel):
    width: int = Field(..., ge=512, le=2048, description="The width of the generated image")
    height: int = Field(..., ge=512, le=2048, description="The height of the generated image")


class RGBColor(BaseModel):
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)


ImageSize = Union[ImageSizeName, CustomImageSize]


class GenerationParameters(BaseModel):
    """Caller-facing parameters shared by the synchronous and queued tools."""

    prompt: str = Field(..., min_length=1, description="The text prompt to generate an image from")
    image_size: ImageSize = Field("1024x1024", description="Predefined size or custom width/height")
    style: Style = "any"
    colors: list[RGBColor] | None = Field(default=None, max_length=5)
    style_id: str | None = None
    enable_safety_checker: bool = True
    num_images: int = Field(1, ge=1, le=4)
    seed: int | None = None

    @property
    def size_label(self) -> str:
        if isinstance(self.image_size, CustomImageSize):
            return f"{self.image_size.width}x{self.image_size.height}"
        return self.image_size

    def to_provider_input(self) -> dict[str, Any]:
        """Return the upstream argument payload, omitting unset optionals."""

        payload: dict[str, Any] = self.model_dump(
            mode="json",
            exclude={"colors", "style_id", "seed"},
        )
        if self.colors:
            payload["colors"] = [color.model_dump() for color in self.colors]
        if self.style_id:
            payload["style_id"] = self.style_id
        if self.seed is not None:
            payload["seed"] = self.seed
        return payload


class GenerationRequest(GenerationParameters):
    sync_mode: bool = Field(
        True,
        description="Wait for the image to be generated and uploaded before returning",
    )


class QueueSubmission(GenerationParameters):
    webhook_url: str | None = Field(default=None, description="Optional webhook URL for result notifications")

    def to_provider_input(self) -> dict[str, Any]:
        payload = super().to_provider_input()
        # delivered as a side channel, never part of the model input
        payload.pop("webhook_url", None)
        return payload
