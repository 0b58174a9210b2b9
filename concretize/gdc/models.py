"""Source and concept node representations for concept deduplication."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple

from ..config import GDCSettings


def concept_identifier(lemma: str, base_iri: str) -> str:
    """Return the content-addressed identifier for ``lemma``.

    The identifier depends only on the lower-cased lemma, so the same phrase
    anywhere in the corpus maps to the same node.
    """

    digest = hashlib.sha256(lemma.lower().encode("utf-8")).hexdigest()[:16]
    return f"{base_iri}/{digest}"


@dataclass(frozen=True)
class SourceNode:
    """A generic JSON-LD node: identifier, types and text-bearing properties."""

    identifier: str
    types: Tuple[str, ...]
    texts: Mapping[str, Tuple[str, ...]]

    @classmethod
    def from_jsonld(cls, node: Mapping[str, Any], text_properties: Sequence[str]) -> "SourceNode":
        raw_types = node.get("@type") or ()
        types = (raw_types,) if isinstance(raw_types, str) else tuple(raw_types)
        texts: Dict[str, Tuple[str, ...]] = {}
        for prop in text_properties:
            values = node.get(prop)
            if not isinstance(values, list):
                continue
            strings = tuple(
                item["@value"]
                for item in values
                if isinstance(item, Mapping)
                and isinstance(item.get("@value"), str)
                and item["@value"].strip()
            )
            if strings:
                texts[prop] = strings
        return cls(identifier=str(node.get("@id", "")), types=types, texts=texts)

    def iter_texts(self) -> Iterator[str]:
        for values in self.texts.values():
            yield from values


@dataclass
class ConceptNode:
    """A deduplicated phrase with backlinks to the sources that mention it."""

    identifier: str
    label: str
    backlinks: List[str] = field(default_factory=list)

    def add_backlink(self, source_id: str) -> None:
        if source_id not in self.backlinks:
            self.backlinks.append(source_id)

    def to_jsonld(self, settings: GDCSettings) -> Dict[str, Any]:
        return {
            "@id": self.identifier,
            "@type": [settings.type_iri],
            settings.label_property: [{"@value": self.label}],
            settings.backlink_property: [{"@id": source} for source in self.backlinks],
        }


__all__ = ["ConceptNode", "SourceNode", "concept_identifier"]
