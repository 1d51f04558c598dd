"""Tool server for fal.ai Recraft v3 image generation."""

__version__ = "1.0.0"
