"""Controlled vocabularies shared by the tagger, chunker and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

__all__ = [
    "ChunkType",
    "TaggedWord",
    "NOUN_PHRASE_TAGS",
    "VERB_TAGS",
    "FINITE_VERB_TAGS",
    "OPEN_QUOTE",
    "CLOSE_QUOTE",
    "is_noun_tag",
    "is_verb_tag",
    "is_noun_chunk_tag",
    "is_verb_chunk_tag",
]

OPEN_QUOTE = "``"
CLOSE_QUOTE = "''"

VERB_TAGS: FrozenSet[str] = frozenset({"VB", "VBD", "VBG", "VBN", "VBP", "VBZ"})
FINITE_VERB_TAGS: FrozenSet[str] = frozenset({"VB", "VBD", "VBP", "VBZ"})
NOUN_PHRASE_TAGS: FrozenSet[str] = frozenset({"PRP", "PRP$", "POS", "CD", "WP$"})


class ChunkType(str, Enum):
    """Phrase classes produced by the chunker."""

    NP = "NP"
    VP = "VP"
    O = "O"  # noqa: E741


@dataclass(frozen=True)
class TaggedWord:
    """A surface word and the single part-of-speech tag assigned to it."""

    word: str
    tag: str

    def to_dict(self) -> dict:
        return {"word": self.word, "tag": self.tag}


def is_noun_tag(tag: Optional[str]) -> bool:
    return bool(tag) and tag.startswith("NN")


def is_verb_tag(tag: Optional[str]) -> bool:
    return bool(tag) and tag.startswith("VB")


def is_noun_chunk_tag(tag: Optional[str]) -> bool:
    """Return ``True`` for tags that extend a noun phrase."""

    if not tag:
        return False
    return tag.startswith(("DT", "JJ", "NN")) or tag in NOUN_PHRASE_TAGS


def is_verb_chunk_tag(tag: Optional[str]) -> bool:
    """Return ``True`` for tags that extend a verb phrase (verbs, modals, adverbs)."""

    if not tag:
        return False
    return tag.startswith("VB") or tag in {"MD", "RB"}
