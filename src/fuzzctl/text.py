"""Small string helpers shared by the listing and dispatch code."""

from __future__ import annotations

import re
from typing import List, Sequence

NOT_FOUND = -1

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def array_contains(item: str, items: Sequence[str]) -> int:
    """Return the index of the first exact match of ``item``, or ``NOT_FOUND``."""
    for index, candidate in enumerate(items):
        if candidate == item:
            return index
    return NOT_FOUND


def split(separator: str, text: str) -> List[str]:
    """Split on the literal separator, keeping whitespace inside elements."""
    if not separator:
        raise ValueError("separator cannot be empty")
    if not text:
        return []
    return text.split(separator)


def join(separator: str, items: Sequence[str]) -> str:
    return separator.join(items)


def trim_collapse(text: str) -> str:
    """Strip ``text`` and collapse every whitespace run to a single space."""
    return " ".join(text.split())


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)
