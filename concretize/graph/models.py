"""Dependency edge model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

CONJUNCTION_PREFIX = "conj_"


@dataclass(frozen=True)
class DependencyEdge:
    """A labelled relation from a head phrase to a dependent phrase.

    Edges compare and hash by value, so duplicates collapse in sets.
    """

    head: str
    relation: str
    dependent: str

    @property
    def is_conjunction(self) -> bool:
        return self.relation.startswith(CONJUNCTION_PREFIX)

    def format(self) -> str:
        return f"({self.head}) --[{self.relation}]--> ({self.dependent})"

    def to_dict(self) -> Dict[str, str]:
        return {"head": self.head, "relation": self.relation, "dependent": self.dependent}


def dedupe_edges(edges: Iterable[DependencyEdge]) -> List[DependencyEdge]:
    """Drop structurally identical edges, keeping first-seen order."""

    seen = set()
    unique: List[DependencyEdge] = []
    for edge in edges:
        if edge in seen:
            continue
        seen.add(edge)
        unique.append(edge)
    return unique


def format_edges(edges: Iterable[DependencyEdge]) -> str:
    """Render edges one per line as ``(head) --[rel]--> (dependent)``."""

    return "\n".join(edge.format() for edge in dedupe_edges(edges))


__all__ = ["CONJUNCTION_PREFIX", "DependencyEdge", "dedupe_edges", "format_edges"]
