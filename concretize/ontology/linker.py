"""Link phrases to Wikidata entities by multi-criterion scoring."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

from ..config import LinkerSettings
from ..nlp.taxonomy import ChunkType
from ..text.lemmatizer import Lemmatizer
from .clients import SearchHit, WikidataClient

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkContext:
    """What the rest of the analysis says about a phrase."""

    chunk_type: ChunkType = ChunkType.NP
    context_terms: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class LinkedEntity:
    phrase: str
    iri: str
    label: str
    description: Optional[str]
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phrase": self.phrase,
            "iri": self.iri,
            "label": self.label,
            "description": self.description,
            "confidence": self.confidence,
        }


@dataclass
class ScoredCandidate:
    hit: SearchHit
    rank: int
    score: float = 0.0
    types: FrozenSet[str] = field(default_factory=frozenset)


def claim_targets(entity: Optional[Dict[str, Any]], properties: Sequence[str]) -> List[str]:
    """Return entity ids referenced by ``properties`` claims, skipping malformed ones."""

    if not entity:
        return []
    claims = entity.get("claims") or {}
    targets: List[str] = []
    for prop in properties:
        for claim in claims.get(prop, []) or []:
            try:
                value = claim["mainsnak"]["datavalue"]["value"]["id"]
            except (KeyError, TypeError):
                continue
            if isinstance(value, str):
                targets.append(value)
    return targets


def english_label(entity: Optional[Dict[str, Any]]) -> str:
    try:
        return str(entity["labels"]["en"]["value"])
    except (KeyError, TypeError):
        return ""


class EntityLinker:
    """Resolve a phrase to at most one Wikidata entity.

    Candidates come from a search cascade over the phrase, its last word and
    that word's lemma. Each candidate is scored on keyword overlap with its
    label and description, on "resonance" between its type labels and the
    other terms of the analysis, and on whether its types fit the phrase's
    chunk type. The best candidate wins if it reaches the confidence floor.
    """

    def __init__(
        self,
        client: WikidataClient,
        lemmatizer: Optional[Lemmatizer] = None,
        settings: Optional[LinkerSettings] = None,
    ):
        self.client = client
        self.lemmatizer = lemmatizer or Lemmatizer()
        self.settings = settings or LinkerSettings()

    # ------------------------------------------------------------------
    def search_cascade(self, phrase: str) -> List[str]:
        """Search terms for ``phrase``, most specific first, without duplicates."""

        lowered = phrase.lower().strip()
        words = lowered.split()
        terms = [lowered]
        if len(words) > 1:
            terms.append(words[-1])
            terms.append(self.lemmatizer.lemmatize(words[-1]))
        elif words:
            terms.append(self.lemmatizer.lemmatize(lowered))
        return [t for t in dict.fromkeys(terms) if t]

    def keywords(self, phrase: str) -> FrozenSet[str]:
        return frozenset(self.lemmatizer.lemmatize_word(w) for w in phrase.lower().split())

    def candidates(self, phrase: str) -> List[SearchHit]:
        """Collect search hits over the cascade, deduplicated by id and capped."""

        seen = set()
        hits: List[SearchHit] = []
        for term in self.search_cascade(phrase):
            try:
                results = self.client.search(term)
            except Exception as exc:
                LOGGER.warning("search for %r failed: %s", term, exc)
                continue
            for hit in results:
                if hit.id not in seen:
                    seen.add(hit.id)
                    hits.append(hit)
        return hits[: self.settings.max_candidates]

    # ------------------------------------------------------------------
    def score(
        self, hit: SearchHit, rank: int, keywords: Iterable[str], context: LinkContext
    ) -> ScoredCandidate:
        """Score one candidate; fetch failures propagate to the caller."""

        s = self.settings
        keywords = list(keywords)
        label = (hit.label or "").lower()
        description = (hit.description or "").lower()
        score = s.label_weight * sum(1 for kw in keywords if kw in label)
        score += s.description_weight * sum(1 for kw in keywords if kw in description)
        if description:
            score += s.description_bonus

        entity = self.client.get_entities([hit.id]).get(hit.id)
        type_ids = claim_targets(entity, s.type_properties)
        if type_ids:
            type_entities = self.client.get_entities(type_ids)
            for type_id in type_ids:
                for word in english_label(type_entities.get(type_id)).lower().split():
                    if word in context.context_terms:
                        score += s.resonance_weight
        types = frozenset(type_ids)
        score += self.type_adjustment(types, context.chunk_type)
        return ScoredCandidate(hit=hit, rank=rank, score=score, types=types)

    def type_adjustment(self, types: FrozenSet[str], chunk_type: ChunkType) -> float:
        """Penalise types of the wrong semantic class, reward the expected class."""

        s = self.settings
        if chunk_type is ChunkType.VP:
            expected, unexpected = s.action_types, s.object_types
        else:
            expected, unexpected = s.object_types, s.action_types
        adjustment = 0.0
        if types & unexpected:
            adjustment -= s.mismatch_penalty
        if types & expected:
            adjustment += s.match_bonus
        return adjustment

    def _score_all(
        self, hits: Sequence[SearchHit], keywords: FrozenSet[str], context: LinkContext
    ) -> List[ScoredCandidate]:
        scored: List[ScoredCandidate] = []
        workers = max(1, min(self.settings.max_workers, len(hits)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.score, hit, rank, keywords, context): hit
                for rank, hit in enumerate(hits)
            }
            for future in as_completed(futures):
                hit = futures[future]
                try:
                    scored.append(future.result())
                except Exception as exc:
                    LOGGER.warning("scoring candidate %s failed: %s", hit.id, exc)
        return scored

    def link(self, phrase: str, context: Optional[LinkContext] = None) -> Optional[LinkedEntity]:
        """Return the best entity for ``phrase`` or ``None`` below the floor."""

        context = context or LinkContext()
        if not phrase or not phrase.strip():
            return None
        hits = self.candidates(phrase)
        if not hits:
            return None
        scored = self._score_all(hits, self.keywords(phrase), context)
        if not scored:
            return None
        best = min(scored, key=lambda c: (-c.score, c.rank))
        if best.score < self.settings.confidence_floor:
            LOGGER.debug("best candidate %s for %r scored %.1f, below floor", best.hit.id, phrase, best.score)
            return None
        return LinkedEntity(
            phrase=phrase,
            iri=self.client.entity_iri(best.hit.id),
            label=best.hit.label,
            description=best.hit.description,
            confidence=best.score,
        )


__all__ = ["EntityLinker", "LinkContext", "LinkedEntity", "ScoredCandidate", "claim_targets"]
