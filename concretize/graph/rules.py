"""Dependency rules over chunk-type windows.

A :class:`DependencyRule` pairs a fixed window of chunk types with an action
that inspects the matched chunks (and, for attachment, earlier chunks) and
returns zero or more edges. :data:`DEPENDENCY_RULES` is the ordered table the
parser runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..nlp.chunker import Chunk
from ..nlp.taxonomy import VERB_TAGS, ChunkType
from .models import CONJUNCTION_PREFIX, DependencyEdge

NP, VP, O = ChunkType.NP, ChunkType.VP, ChunkType.O

BE_WORDS = frozenset({"be", "is", "am", "are", "was", "were", "being", "been"})
DO_WORDS = frozenset({"do", "does", "did"})
DEFAULT_SEARCH_WINDOW = 5


@dataclass(frozen=True)
class PatternMatch:
    """A rule window matched at ``index`` within ``chunks``."""

    chunks: Sequence[Chunk]
    index: int
    length: int
    search_window: int = DEFAULT_SEARCH_WINDOW

    @property
    def window(self) -> Sequence[Chunk]:
        return self.chunks[self.index : self.index + self.length]

    def at(self, position: int) -> Optional[Chunk]:
        if 0 <= position < len(self.chunks):
            return self.chunks[position]
        return None

    def preceding(self) -> range:
        """Indices before the window, nearest first, within the search window."""

        start = max(0, self.index - self.search_window)
        return range(self.index - 1, start - 1, -1)


Action = Callable[[PatternMatch], List[DependencyEdge]]


@dataclass(frozen=True)
class DependencyRule:
    name: str
    pattern: Tuple[ChunkType, ...]
    action: Action


def is_passive(chunk: Optional[Chunk]) -> bool:
    """``True`` when a form of *be* is immediately followed by a past participle."""

    if chunk is None:
        return False
    words = chunk.words
    for current, following in zip(words, words[1:]):
        if current.tag in VERB_TAGS and current.word.lower() in BE_WORDS and following.tag == "VBN":
            return True
    return False


def edge(head: str, relation: str, dependent: str) -> List[DependencyEdge]:
    if not head or not dependent:
        return []
    return [DependencyEdge(head, relation, dependent)]


# ---------------------------------------------------------------------------
# Subjects and objects
# ---------------------------------------------------------------------------


def gerund_subject(match: PatternMatch) -> List[DependencyEdge]:
    subject, verb = match.window
    if len(subject.words) == 1 and subject.first_tag == "VBG":
        return edge(verb.head, "nsubj", subject.head)
    return []


def pronoun_subject(match: PatternMatch) -> List[DependencyEdge]:
    subject, verb = match.window
    if subject.first_tag in {"PRP", "WP"}:
        return edge(verb.head, "nsubj", subject.head)
    return []


def subject_verb(match: PatternMatch) -> List[DependencyEdge]:
    subject, verb = match.window
    relation = "nsubj:pass" if is_passive(verb) else "nsubj"
    return edge(verb.head, relation, subject.head)


def verb_object(match: PatternMatch) -> List[DependencyEdge]:
    verb, obj = match.window
    # A lone do-support auxiliary takes no object.
    if len(verb.words) == 1 and verb.first_word.lower() in DO_WORDS:
        return []
    return edge(verb.head, "dobj", obj.head)


# ---------------------------------------------------------------------------
# Relative clauses
# ---------------------------------------------------------------------------


def relative_clause(match: PatternMatch) -> List[DependencyEdge]:
    noun, pronoun = match.window
    if pronoun.first_tag == "WP":
        return edge(noun.head, "ref", pronoun.head)
    return []


def relative_clause_comma(match: PatternMatch) -> List[DependencyEdge]:
    noun, comma, pronoun = match.window
    if comma.first_tag == "," and pronoun.first_tag == "WP":
        return edge(noun.head, "ref", pronoun.head)
    return []


def possessive_relative(match: PatternMatch) -> List[DependencyEdge]:
    noun, marker, subject = match.window
    if marker.first_tag == "WP$":
        return edge(noun.head, "poss", subject.head)
    return []


def possessive_relative_phrase(match: PatternMatch) -> List[DependencyEdge]:
    """``the person whose car``: the second noun phrase opens with ``whose``."""

    noun, clause = match.window
    if clause.first_tag == "WP$":
        return edge(noun.head, "poss", clause.head)
    return []


# ---------------------------------------------------------------------------
# Agents, coordination and modifiers
# ---------------------------------------------------------------------------


def passive_agent(match: PatternMatch) -> List[DependencyEdge]:
    prep, agent = match.window
    if (prep.first_word or "").lower() != "by":
        return []
    for position in match.preceding():
        candidate = match.chunks[position]
        if candidate.type is VP:
            # The nearest verb phrase decides; an active one blocks the agent.
            if is_passive(candidate):
                return edge(candidate.head, "obl:agent", agent.head)
            return []
    return []


def noun_coordination(match: PatternMatch) -> List[DependencyEdge]:
    first, conj, second = match.window
    if conj.first_tag != "CC":
        return []
    before = match.at(match.index - 1)
    after = match.at(match.index + match.length)
    # VP [NP CC NP] VP coordinates clauses rather than nouns.
    if before is not None and after is not None and before.type is VP and after.type is VP:
        return []
    return edge(first.head, f"{CONJUNCTION_PREFIX}{conj.first_word.lower()}", second.head)


def verb_coordination(match: PatternMatch) -> List[DependencyEdge]:
    first, conj, second = match.window
    if conj.first_tag not in {"CC", ","}:
        return []
    word = "and" if conj.first_tag == "," else conj.first_word.lower()
    return edge(first.head, f"{CONJUNCTION_PREFIX}{word}", second.head)


def gerund_modifier(match: PatternMatch) -> List[DependencyEdge]:
    noun, prep, verb = match.window
    if (prep.first_word or "").lower() == "of" and verb.first_tag == "VBG":
        return edge(noun.head, "vmod", verb.head)
    return []


def prepositional_attachment(match: PatternMatch) -> List[DependencyEdge]:
    prep, obj = match.window
    if prep.first_tag != "IN":
        return []
    relation = f"prep_{prep.first_word.lower()}"
    for position in match.preceding():
        if match.chunks[position].type is VP:
            return edge(match.chunks[position].head, relation, obj.head)
    for position in range(match.index - 1, -1, -1):
        if match.chunks[position].type is NP:
            return edge(match.chunks[position].head, relation, obj.head)
    return []


DEPENDENCY_RULES: Tuple[DependencyRule, ...] = (
    DependencyRule("gerund-subject", (VP, VP), gerund_subject),
    DependencyRule("pronoun-subject", (O, VP), pronoun_subject),
    DependencyRule("subject-verb", (NP, VP), subject_verb),
    DependencyRule("verb-object", (VP, NP), verb_object),
    DependencyRule("relative-clause", (NP, O), relative_clause),
    DependencyRule("relative-clause-comma", (NP, O, O), relative_clause_comma),
    DependencyRule("possessive-relative", (NP, O, NP), possessive_relative),
    DependencyRule("possessive-relative-phrase", (NP, NP), possessive_relative_phrase),
    DependencyRule("passive-agent", (O, NP), passive_agent),
    DependencyRule("noun-coordination", (NP, O, NP), noun_coordination),
    DependencyRule("verb-coordination", (VP, O, VP), verb_coordination),
    DependencyRule("gerund-modifier", (NP, O, VP), gerund_modifier),
    DependencyRule("prepositional-attachment", (O, NP), prepositional_attachment),
)


__all__ = ["DEPENDENCY_RULES", "DependencyRule", "PatternMatch", "is_passive"]
