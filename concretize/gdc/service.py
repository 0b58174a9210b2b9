"""Mine deduplicated concept nodes from the text of source nodes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..config import GDCSettings
from ..nlp.chunker import chunk
from ..nlp.tagger import POSTagger, QuoteState
from ..nlp.taxonomy import ChunkType
from ..text.lemmatizer import Lemmatizer
from .models import ConceptNode, SourceNode, concept_identifier

LOGGER = logging.getLogger(__name__)


class GDCService:
    """Build one concept node per distinct lemmatised phrase in a corpus."""

    def __init__(
        self,
        tagger: Optional[POSTagger] = None,
        lemmatizer: Optional[Lemmatizer] = None,
        settings: Optional[GDCSettings] = None,
    ):
        self.tagger = tagger or POSTagger()
        self.lemmatizer = lemmatizer or Lemmatizer()
        self.settings = settings or GDCSettings()

    def is_excluded(self, node: SourceNode) -> bool:
        return any(t in self.settings.excluded_types for t in node.types)

    def phrases(self, text: str) -> List[str]:
        """Lemmatised noun and verb phrases of ``text``, in order."""

        # Each text gets fresh quote toggles so results do not depend on
        # processing order.
        tagged = self.tagger.tag(text, QuoteState())
        lemmas = []
        for piece in chunk(tagged, self.lemmatizer):
            if piece.type is ChunkType.O or not piece.concept_text.strip():
                continue
            lemmas.append(piece.lemma)
        return lemmas

    def process(self, nodes: Iterable[Mapping[str, Any]]) -> List[ConceptNode]:
        """Return concept nodes for ``nodes`` in first-seen order."""

        concepts: Dict[str, ConceptNode] = {}
        for raw in nodes:
            node = SourceNode.from_jsonld(raw, self.settings.text_properties)
            if not node.identifier or self.is_excluded(node):
                continue
            for text in node.iter_texts():
                for lemma in self.phrases(text):
                    key = lemma.lower()
                    concept = concepts.get(key)
                    if concept is None:
                        concept = ConceptNode(
                            identifier=concept_identifier(key, self.settings.base_iri),
                            label=lemma,
                        )
                        concepts[key] = concept
                    concept.add_backlink(node.identifier)
        LOGGER.debug("derived %d concept nodes", len(concepts))
        return list(concepts.values())


__all__ = ["GDCService"]
