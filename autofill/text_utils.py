"""Text normalization and tokenization for field hints."""

from __future__ import annotations

import re
from typing import List

STOP_WORDS = frozenset({"*", ":", "-", "—", "(", ")", "[", "]"})

_SEPARATORS = re.compile(r"[_/\\|]+")
# \w is Unicode-aware; underscores are already gone after the separator pass.
_DISALLOWED = re.compile(r"[^\w\s+\-]")
_WHITESPACE = re.compile(r"\s+")


def safe_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def tokenize(text: object) -> List[str]:
    """Lower-case ``text`` and split it into stop-word filtered tokens."""
    lowered = safe_str(text).lower()
    if not lowered:
        return []
    cleaned = _SEPARATORS.sub(" ", lowered)
    cleaned = _DISALLOWED.sub(" ", cleaned)
    return [part for part in cleaned.split() if part not in STOP_WORDS]


def normalize_for_compare(value: object) -> str:
    return _WHITESPACE.sub(" ", safe_str(value).lower()).strip()


__all__ = ["STOP_WORDS", "safe_str", "tokenize", "normalize_for_compare"]
