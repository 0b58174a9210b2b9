"""Acronym detection for ``ACRONYM (Expansion)`` style definitions."""

from __future__ import annotations

import re
from typing import Dict, Optional

_EXPANSION_RE = re.compile(r"\b([A-Z]{2,6})\s*\(([^)]+)\)")
_STANDALONE_RE = re.compile(r"\b([A-Z]{2,6})\b")


def extract_acronyms(text: str) -> Dict[str, Optional[str]]:
    """Return acronyms found in ``text`` mapped to their expansion.

    Explicit definitions are collected first. Acronyms that only appear on
    their own map to ``None``. Insertion order follows first appearance
    within each group.
    """

    table: Dict[str, Optional[str]] = {}
    for match in _EXPANSION_RE.finditer(text):
        table.setdefault(match.group(1), " ".join(match.group(2).split()))
    for match in _STANDALONE_RE.finditer(text):
        table.setdefault(match.group(1), None)
    return table


def strip_acronym_expansions(text: str) -> str:
    """Drop parenthesised expansions so ``FDA (Food ...) rules`` reads ``FDA rules``."""

    return _EXPANSION_RE.sub(r"\1", text)


__all__ = ["extract_acronyms", "strip_acronym_expansions"]
