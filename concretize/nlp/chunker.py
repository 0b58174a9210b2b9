"""Greedy noun/verb phrase chunking over tagged words."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..text.lemmatizer import Lemmatizer
from .taxonomy import ChunkType, TaggedWord, is_noun_chunk_tag, is_verb_chunk_tag

# Tags stripped from the front of a phrase before lemmatisation.
LEADING_DETERMINER_TAGS = frozenset({"DT", "WP$"})
_MAIN_VERB_TAGS = ("VB", "MD")


@dataclass(frozen=True)
class Chunk:
    """A contiguous phrase of tagged words.

    ``text`` is the surface form, ``concept_text`` drops leading determiners
    and ``lemma`` lemmatises the last word of ``concept_text``. ``head`` is the
    phrase used in dependency edges: the lemma, except for verb phrases where
    it is the lemma of the main verb (``was written`` -> ``write``).
    """

    words: Tuple[TaggedWord, ...]
    type: ChunkType
    text: str
    concept_text: str
    lemma: str
    head: str

    @property
    def first(self) -> Optional[TaggedWord]:
        return self.words[0] if self.words else None

    @property
    def first_tag(self) -> Optional[str]:
        return self.words[0].tag if self.words else None

    @property
    def first_word(self) -> Optional[str]:
        return self.words[0].word if self.words else None

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(w.tag for w in self.words)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "text": self.text,
            "concept_text": self.concept_text,
            "lemma": self.lemma,
            "head": self.head,
            "words": [w.to_dict() for w in self.words],
        }


def concept_text(words: Sequence[TaggedWord]) -> str:
    """Join ``words`` after dropping leading determiners."""

    index = 0
    while index < len(words) and words[index].tag in LEADING_DETERMINER_TAGS:
        index += 1
    return " ".join(w.word for w in words[index:])


def _verb_head(words: Sequence[TaggedWord], lemmatizer: Lemmatizer, fallback: str) -> str:
    for word in reversed(words):
        if word.tag.startswith(_MAIN_VERB_TAGS):
            return lemmatizer.lemmatize_word(word.word)
    return fallback


def _gerund_subject(tagged: Sequence[TaggedWord], index: int) -> bool:
    return (
        tagged[index].tag == "VBG"
        and index + 1 < len(tagged)
        and tagged[index + 1].tag in {"VBZ", "VBP", "VBD"}
    )


def make_chunk(
    words: Sequence[TaggedWord], chunk_type: ChunkType, lemmatizer: Lemmatizer
) -> Chunk:
    concept = concept_text(words)
    lemma = lemmatizer.lemmatize(concept)
    head = _verb_head(words, lemmatizer, lemma) if chunk_type is ChunkType.VP else lemma
    return Chunk(
        words=tuple(words),
        type=chunk_type,
        text=" ".join(w.word for w in words),
        concept_text=concept,
        lemma=lemma,
        head=head,
    )


def chunk(tagged: Sequence[TaggedWord], lemmatizer: Optional[Lemmatizer] = None) -> List[Chunk]:
    """Group ``tagged`` into NP, VP and single-word O chunks, left to right.

    A wh-possessive (``whose``) always opens a new noun phrase so that
    possessive relative clauses stay visible to the parser. A gerund directly
    followed by a finite verb (``Running is fun``) forms a verb phrase of its
    own so the gerund can act as the subject.
    """

    lemmatizer = lemmatizer or Lemmatizer()
    chunks: List[Chunk] = []
    i = 0
    while i < len(tagged):
        tag = tagged[i].tag
        if is_noun_chunk_tag(tag):
            j = i + 1
            while j < len(tagged) and is_noun_chunk_tag(tagged[j].tag) and tagged[j].tag != "WP$":
                j += 1
            kind = ChunkType.NP
        elif is_verb_chunk_tag(tag):
            j = i + 1
            if not _gerund_subject(tagged, i):
                while j < len(tagged) and is_verb_chunk_tag(tagged[j].tag):
                    j += 1
            kind = ChunkType.VP
        else:
            j = i + 1
            kind = ChunkType.O
        chunks.append(make_chunk(tagged[i:j], kind, lemmatizer))
        i = j
    return chunks


__all__ = ["Chunk", "LEADING_DETERMINER_TAGS", "chunk", "concept_text", "make_chunk"]
