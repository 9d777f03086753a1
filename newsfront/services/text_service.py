"""Text helpers for article excerpts and reading time."""

from __future__ import annotations

import math
import re

WORDS_PER_MINUTE = 200
DEFAULT_TRUNCATE_LENGTH = 160
ELLIPSIS = "..."

_TAG_RE = re.compile(r"<[^>]*>")


def calculate_reading_time(text: str | None) -> int:
    """Estimated reading time in whole minutes, never less than 1."""
    if not text:
        return 1
    word_count = len(text.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def strip_html(text: str | None) -> str:
    """Remove all markup tags."""
    if not text:
        return ""
    return _TAG_RE.sub("", text)


def truncate_text(text: str | None, max_len: int = DEFAULT_TRUNCATE_LENGTH) -> str:
    """Truncate to ``max_len`` characters plus an ellipsis when too long."""
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    return text[:max_len].rstrip() + ELLIPSIS
