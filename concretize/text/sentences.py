"""Sentence segmentation utilities backed by spaCy."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator, List

import spacy
from spacy.language import Language
from spacy.tokens import Doc, Span


@lru_cache(maxsize=1)
def get_nlp() -> Language:
    """Return a cached blank English pipeline with a rule-based sentencizer."""

    nlp = spacy.blank("en")
    if "sentencizer" not in nlp.pipe_names:
        nlp.add_pipe("sentencizer")
    return nlp


def _mark_paragraph_boundaries(doc: Doc) -> None:
    """Ensure blank-line paragraph breaks start new sentences."""

    for token in doc[:-1]:
        if "\n\n" in token.text:
            doc[token.i + 1].is_sent_start = True


def iter_sentence_spans(doc: Doc) -> Iterator[Span]:
    for span in doc.sents:
        if span.text.strip():
            yield span


def split_sentences(text: str) -> List[str]:
    """Split ``text`` into stripped, non-empty sentence strings."""

    if not text or not text.strip():
        return []
    doc = get_nlp()(text)
    _mark_paragraph_boundaries(doc)
    return [span.text.strip() for span in iter_sentence_spans(doc)]


__all__ = ["get_nlp", "split_sentences"]
