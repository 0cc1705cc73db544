"""Approximate token accounting for context budgets."""

from __future__ import annotations

import math
import re

_NARROW_CHARS = re.compile(r"[A-Za-z0-9\s]")

NARROW_CHARS_PER_TOKEN = 4
WIDE_CHARS_PER_TOKEN = 2


def estimate_tokens(text: str) -> int:
    """Approximate the token cost of ``text`` from its character mix.

    ASCII letters, digits and whitespace are counted at four characters per
    token; everything else (CJK and other wide scripts, punctuation) at two.
    This is a proxy, not a tokenizer: callers should expect roughly 20% error.
    """
    if not text:
        return 0
    narrow = len(_NARROW_CHARS.findall(text))
    wide = len(text) - narrow
    return math.ceil(narrow / NARROW_CHARS_PER_TOKEN + wide / WIDE_CHARS_PER_TOKEN)


__all__ = ["estimate_tokens"]
