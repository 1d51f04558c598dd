"""Tests for artifact file naming."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from recraft_mcp.utils.filenames import MODEL_PREFIX, artifact_filename, filename_timestamp, prompt_slug

FIXED = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "prompt",
    [
        "A Red Fox!!   in the   SNOW...",
        "Émile's café: $5, 50% off?",
        "tabs\tand\nnewlines  everywhere",
        "UPPER-CASE_with-dashes",
    ],
)
def test_slug_is_filesystem_safe(prompt: str) -> None:
    assert re.fullmatch(r"[a-z0-9_]*", prompt_slug(prompt))


def test_full_name_shape() -> None:
    name = artifact_filename("A Red Fox!", 2, 42, now=FIXED)
    assert name == f"{MODEL_PREFIX}_a_red_fox_42_2_2024-05-01T10-20-30-123Z.png"


def test_seed_omitted_when_absent() -> None:
    name = artifact_filename("fox", 1, now=FIXED)
    assert name == "recraft_v3_fox_1_2024-05-01T10-20-30-123Z.png"
    assert "None" not in name
    assert "undefined" not in name


def test_zero_seed_is_kept() -> None:
    assert artifact_filename("fox", 1, 0, now=FIXED).startswith("recraft_v3_fox_0_1_")


def test_slug_truncated_after_collapsing_whitespace() -> None:
    prompt = "word " * 40
    slug = prompt_slug(prompt)
    assert len(slug) == 50
    assert slug.startswith("word_word_")


def test_timestamp_has_no_colons_or_periods() -> None:
    stamp = filename_timestamp(FIXED)
    assert ":" not in stamp
    assert "." not in stamp


def test_ordinals_keep_same_instant_names_apart() -> None:
    first = artifact_filename("same prompt", 1, 7, now=FIXED)
    second = artifact_filename("same prompt", 2, 7, now=FIXED)
    assert first != second
    assert "_7_1_" in first
    assert "_7_2_" in second


def test_instants_keep_repeated_calls_apart() -> None:
    later = datetime(2024, 5, 1, 10, 20, 30, 124000, tzinfo=timezone.utc)
    assert artifact_filename("fox", 1, now=FIXED) != artifact_filename("fox", 1, now=later)
