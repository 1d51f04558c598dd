"""Local file names for generated images.

Names have the shape::

    recraft_v3_{slug}[_{seed}]_{index}_{timestamp}.png

The timestamp (millisecond UTC) keeps repeated calls apart and the 1-based
index keeps images of the same batch apart.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone

MODEL_PREFIX = "recraft_v3"
MAX_SLUG_LENGTH = 50

_UNSAFE_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def prompt_slug(prompt: str) -> str:
    slug = _UNSAFE_CHARS.sub("", prompt.lower())
    slug = _WHITESPACE.sub("_", slug)
    return slug[:MAX_SLUG_LENGTH]


def filename_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC instant with ``:`` and ``.`` replaced by ``-``."""

    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def artifact_filename(
    prompt: str,
    index: int,
    seed: int | None = None,
    *,
    now: datetime | None = None,
) -> str:
    seed_part = f"_{seed}" if seed is not None else ""
    return f"{MODEL_PREFIX}_{prompt_slug(prompt)}{seed_part}_{index}_{filename_timestamp(now)}.png"
