"""Tagger -> chunker -> parser -> linker orchestration per text unit."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..graph.models import DependencyEdge, dedupe_edges, format_edges
from ..graph.parser import DependencyParser
from ..nlp.chunker import Chunk, chunk
from ..nlp.tagger import POSTagger, QuoteState
from ..nlp.taxonomy import ChunkType, TaggedWord
from ..ontology.linker import EntityLinker, LinkContext, LinkedEntity
from ..text.acronyms import extract_acronyms, strip_acronym_expansions
from ..text.lemmatizer import Lemmatizer
from ..text.sentences import split_sentences

LOGGER = logging.getLogger(__name__)


@dataclass
class Analysis:
    """Everything derived from one text unit."""

    text: str
    tagged: List[TaggedWord]
    chunks: List[Chunk]
    edges: List[DependencyEdge]
    acronyms: Dict[str, Optional[str]] = field(default_factory=dict)
    links: List[LinkedEntity] = field(default_factory=list)

    def phrases(self) -> List[str]:
        """Distinct edge endpoints in first-seen order."""

        seen: Dict[str, None] = {}
        for edge in self.edges:
            seen.setdefault(edge.head, None)
            seen.setdefault(edge.dependent, None)
        return [p for p in seen if p]

    def graph(self) -> str:
        return format_edges(self.edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "tagged": [t.to_dict() for t in self.tagged],
            "chunks": [c.to_dict() for c in self.chunks],
            "edges": [e.to_dict() for e in self.edges],
            "acronyms": dict(self.acronyms),
            "links": [link.to_dict() for link in self.links],
        }


def context_terms(phrases: Sequence[str], lemmatizer: Lemmatizer) -> frozenset:
    """The lemma of each phrase's final word."""

    return frozenset(lemmatizer.lemmatize_word(p.split()[-1]) for p in phrases if p.split())


def chunk_type_for(phrase: str, chunks: Sequence[Chunk]) -> ChunkType:
    for candidate in chunks:
        if candidate.head == phrase:
            return candidate.type
    return ChunkType.NP


class Analyzer:
    """Run the full pipeline over a sentence or a document.

    Parameters
    ----------
    tagger, parser, lemmatizer:
        Pipeline stages; defaults are built when omitted.
    linker:
        Optional :class:`EntityLinker`. Without one, analyses carry no links.
    max_workers:
        Upper bound on concurrent phrase lookups.
    """

    def __init__(
        self,
        tagger: Optional[POSTagger] = None,
        parser: Optional[DependencyParser] = None,
        linker: Optional[EntityLinker] = None,
        lemmatizer: Optional[Lemmatizer] = None,
        max_workers: int = 8,
    ):
        self.tagger = tagger or POSTagger()
        self.parser = parser or DependencyParser()
        self.linker = linker
        self.lemmatizer = lemmatizer or Lemmatizer()
        self.max_workers = max_workers

    def analyze(
        self, text: str, quote_state: Optional[QuoteState] = None, link: bool = True
    ) -> Analysis:
        """Analyse one text unit.

        Acronym definitions such as ``FDA (Food and Drug Administration)`` are
        recorded and removed before tagging so the acronym is parsed in place.
        """

        acronyms = extract_acronyms(text)
        tagged = self.tagger.tag(strip_acronym_expansions(text), quote_state)
        chunks = chunk(tagged, self.lemmatizer)
        edges = dedupe_edges(self.parser.parse(chunks))
        analysis = Analysis(text=text, tagged=tagged, chunks=chunks, edges=edges, acronyms=acronyms)
        if link and self.linker is not None:
            analysis.links = self.link_phrases(analysis.phrases(), chunks)
        return analysis

    def analyze_document(self, text: str, link: bool = False) -> List[Analysis]:
        """Analyse each sentence of ``text`` with one document-scoped quote state."""

        state = QuoteState()
        return [self.analyze(sentence, state, link=link) for sentence in split_sentences(text)]

    def link_phrases(self, phrases: Sequence[str], chunks: Sequence[Chunk]) -> List[LinkedEntity]:
        """Link ``phrases`` concurrently; failed or unmatched phrases are dropped."""

        if self.linker is None or not phrases:
            return []
        terms = context_terms(phrases, self.lemmatizer)
        results: Dict[str, LinkedEntity] = {}
        workers = max(1, min(self.max_workers, len(phrases)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(
                    self.linker.link, phrase, LinkContext(chunk_type_for(phrase, chunks), terms)
                ): phrase
                for phrase in phrases
            }
            for future in as_completed(futures):
                phrase = futures[future]
                try:
                    entity = future.result()
                except Exception as exc:
                    LOGGER.warning("linking %r failed: %s", phrase, exc)
                    continue
                if entity is not None:
                    results[phrase] = entity
        return [results[p] for p in phrases if p in results]


__all__ = ["Analysis", "Analyzer", "chunk_type_for", "context_terms"]
