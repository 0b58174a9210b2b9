"""Rule-based dependency parsing over chunk sequences."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..nlp.chunker import Chunk
from ..nlp.taxonomy import ChunkType
from .models import DependencyEdge, dedupe_edges
from .rules import DEFAULT_SEARCH_WINDOW, DEPENDENCY_RULES, DependencyRule, PatternMatch, edge

LOGGER = logging.getLogger(__name__)


def _is_separator(chunk: Chunk, *tags: str) -> bool:
    return chunk.type is ChunkType.O and chunk.first_tag in tags


def find_enumerations(chunks: Sequence[Chunk]) -> tuple[List[DependencyEdge], Set[int]]:
    """Detect ``NP : NP (, NP)* (, and NP)`` lists.

    Every item becomes an ``appos`` dependent of the phrase before the colon.
    Returns the edges and the chunk indices they cover.
    """

    edges: List[DependencyEdge] = []
    covered: Set[int] = set()
    i = 0
    while i < len(chunks) - 2:
        head, colon, first = chunks[i], chunks[i + 1], chunks[i + 2]
        if not (head.type is ChunkType.NP and colon.first_tag == ":" and first.type is ChunkType.NP):
            i += 1
            continue
        edges.extend(edge(head.head, "appos", first.head))
        covered.update((i, i + 1, i + 2))
        j = i + 3
        while j < len(chunks) - 1:
            if (
                j < len(chunks) - 2
                and _is_separator(chunks[j], ",")
                and _is_separator(chunks[j + 1], "CC")
                and chunks[j + 2].type is ChunkType.NP
            ):
                edges.extend(edge(head.head, "appos", chunks[j + 2].head))
                covered.update((j, j + 1, j + 2))
                j += 3
            elif _is_separator(chunks[j], ",", "CC") and chunks[j + 1].type is ChunkType.NP:
                edges.extend(edge(head.head, "appos", chunks[j + 1].head))
                covered.update((j, j + 1))
                j += 2
            else:
                break
        i = j
    return edges, covered


def propagate_coordination(edges: Iterable[DependencyEdge]) -> List[DependencyEdge]:
    """Copy relations across conjuncts.

    For each ``conj_X(a, b)``: relations headed by ``a`` are copied to ``b``,
    relations pointing at ``a`` are copied to point at ``b`` and relations
    pointing at ``b`` are copied to point at ``a``. Only non-conjunction edges
    from the input are copied, and the result holds no duplicates.
    """

    original = dedupe_edges(edges)
    result = list(original)
    seen = set(result)

    def add(candidate: DependencyEdge) -> None:
        if candidate not in seen:
            seen.add(candidate)
            result.append(candidate)

    for coordination in (e for e in original if e.is_conjunction):
        first, second = coordination.head, coordination.dependent
        for dep in original:
            if dep.is_conjunction:
                continue
            if dep.head == first:
                add(DependencyEdge(second, dep.relation, dep.dependent))
            if dep.dependent == first:
                add(DependencyEdge(dep.head, dep.relation, second))
            if dep.dependent == second:
                add(DependencyEdge(dep.head, dep.relation, first))
    return result


class DependencyParser:
    """Two-pass pattern parser followed by coordination propagation.

    Pass one finds colon-introduced enumerations. Pass two runs every rule
    over every matching window, rule by rule. Windows used by an earlier
    match stay eligible for later rules; identical edges are collapsed at
    the end instead.
    """

    def __init__(
        self,
        rules: Optional[Sequence[DependencyRule]] = None,
        search_window: int = DEFAULT_SEARCH_WINDOW,
    ):
        self.rules = tuple(rules) if rules is not None else DEPENDENCY_RULES
        self.search_window = search_window

    def parse(self, chunks: Sequence[Chunk]) -> List[DependencyEdge]:
        edges, _covered = find_enumerations(chunks)
        edges.extend(self.apply_rules(chunks))
        return propagate_coordination(edges)

    def apply_rules(self, chunks: Sequence[Chunk]) -> List[DependencyEdge]:
        types = [c.type for c in chunks]
        edges: List[DependencyEdge] = []
        for rule in self.rules:
            size = len(rule.pattern)
            for index in range(len(chunks) - size + 1):
                if tuple(types[index : index + size]) != rule.pattern:
                    continue
                found = rule.action(PatternMatch(chunks, index, size, self.search_window))
                if found:
                    LOGGER.debug("rule %s matched at %d: %s", rule.name, index, found)
                    edges.extend(found)
        return edges


__all__ = ["DependencyParser", "find_enumerations", "propagate_coordination"]
