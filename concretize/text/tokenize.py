"""Sentence tokenisation for the tagger."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

_LETTERS = "A-Za-zÀ-ÖØ-öø-ÿ"

_APOSTROPHES = re.compile(r"[’‘`]")
_WHITESPACE = re.compile(r"\s+")
_TOKEN_RE = re.compile(
    r"\d+(?:[.,]\d+)+"
    r"|\.\.\.|…"
    rf"|[{_LETTERS}0-9]+(?:['-][{_LETTERS}0-9]+)*'?"
    r"|[.,!?;:()\"'“”\-–—%]"
)


@dataclass(frozen=True)
class Token:
    """A raw token and its character offset in the normalised sentence."""

    text: str
    start: int


def normalize(sentence: str) -> str:
    """Fold apostrophe variants to ``'`` and collapse runs of whitespace."""

    text = _APOSTROPHES.sub("'", sentence)
    return _WHITESPACE.sub(" ", text)


def tokenize(sentence: str) -> List[Token]:
    """Split ``sentence`` into word, number, ellipsis and punctuation tokens.

    Characters outside the recognised classes are dropped.
    """

    if not sentence:
        return []
    text = normalize(sentence)
    return [Token(match.group(0), match.start()) for match in _TOKEN_RE.finditer(text)]


__all__ = ["Token", "normalize", "tokenize"]
