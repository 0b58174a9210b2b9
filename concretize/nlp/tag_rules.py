"""Ordered contextual disambiguation rules for the POS tagger.

Each rule looks at one :class:`TagContext` and either returns a tag or
``None``. :func:`apply_rules` walks :data:`TAG_RULES` in order and the first
rule that answers wins, so the position of a rule in the table is its
priority. Most rules only return a tag that is among the word's lexicon
candidates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from .lexicon import Lexicon
from .taxonomy import FINITE_VERB_TAGS, VERB_TAGS, is_noun_tag, is_verb_tag

LOGGER = logging.getLogger(__name__)

NEGATIONS = frozenset({"n't", "not"})
DO_AUXILIARIES = frozenset({"do", "does", "did"})
HAVE_AUXILIARIES = frozenset({"have", "has", "had"})
BE_FORMS = frozenset({"is", "am", "are", "was", "were"})
COPULAS = frozenset(
    {
        "is",
        "am",
        "are",
        "was",
        "were",
        "be",
        "being",
        "been",
        "seem",
        "seems",
        "seemed",
        "become",
        "becomes",
        "became",
        "'re",
        "'s",
    }
)
COMMON_MODALS = frozenset({"can", "could", "may", "might", "must", "shall", "should", "will", "would"})
OBJECT_PRONOUNS = frozenset({"it", "him", "her", "them", "me", "us"})
THIRD_PERSON_SINGULAR = frozenset({"he", "she", "it"})
AUXILIARY_TAGS = frozenset({"MD", "VBP", "VBZ", "VBD"})
AUXILIARY_WORDS = frozenset(
    {
        "am",
        "is",
        "are",
        "was",
        "were",
        "be",
        "being",
        "been",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "shall",
        "would",
        "should",
        "can",
        "could",
        "may",
        "might",
        "must",
        "'re",
        "'ve",
        "'ll",
        "'d",
    }
)
# Finite verb forms that keep their verb reading inside a noun run.
_COMPOUND_NOUN_VERB_EXCEPTIONS = frozenset({"is", "are", "was", "were", "has", "have", "had"})


def _lower(word: Optional[str]) -> Optional[str]:
    return word.lower() if word else None


def is_auxiliary_or_modal(tag: Optional[str], word: Optional[str]) -> bool:
    return (tag in AUXILIARY_TAGS) or (_lower(word) in AUXILIARY_WORDS)


@dataclass(frozen=True)
class TagContext:
    """The tagging decision point for one word and its neighbours."""

    word: str
    index: int
    candidates: Tuple[str, ...]
    lexicon: Lexicon
    prev_word: Optional[str] = None
    prev_tag: Optional[str] = None
    prev2_word: Optional[str] = None
    prev2_tag: Optional[str] = None
    next_word: Optional[str] = None

    @property
    def lower(self) -> str:
        return self.word.lower()

    @property
    def prev_lower(self) -> Optional[str]:
        return _lower(self.prev_word)

    @property
    def negated(self) -> bool:
        """``True`` when the previous word is a negation to be looked through."""

        return self.prev_lower in NEGATIONS

    @property
    def effective_prev_word(self) -> Optional[str]:
        return self.prev2_word if self.negated else self.prev_word

    @property
    def effective_prev_tag(self) -> Optional[str]:
        return self.prev2_tag if self.negated else self.prev_tag

    def has(self, tag: str) -> bool:
        return tag in self.candidates

    def next_tags(self) -> Tuple[str, ...]:
        return self.lexicon.tags(self.next_word)


RuleFn = Callable[[TagContext], Optional[str]]


@dataclass(frozen=True)
class TagRule:
    name: str
    apply: RuleFn


@dataclass(frozen=True)
class RuleHit:
    tag: str
    rule: str


# ---------------------------------------------------------------------------
# Structural rules
# ---------------------------------------------------------------------------


def question_inversion(ctx: TagContext) -> Optional[str]:
    """``Did the team approve``: auxiliary + subject + ambiguous verb is a base verb."""

    if (
        ctx.prev2_tag in {"VBD", "VBP", "VBZ"}
        and _lower(ctx.prev2_word) in AUXILIARY_WORDS
        and ctx.prev_tag in {"PRP", "DT"}
        and ctx.has("VB")
    ):
        return "VB"
    return None


def comparative_after_copula(ctx: TagContext) -> Optional[str]:
    if ctx.prev_lower not in BE_FORMS:
        return None
    if ctx.lower.endswith("er") and ctx.has("JJR"):
        return "JJR"
    if ctx.lower.endswith("est") and ctx.has("JJS"):
        return "JJS"
    return None


def gerund_subject(ctx: TagContext) -> Optional[str]:
    """``Running is fun``: a sentence-initial gerund followed by a finite verb."""

    if ctx.prev_tag is None and ctx.has("VBG") and ctx.next_word:
        if any(tag in {"VBZ", "VBP", "VBD"} for tag in ctx.next_tags()):
            return "VBG"
    return None


# ---------------------------------------------------------------------------
# Word-specific heuristics
# ---------------------------------------------------------------------------


def there(ctx: TagContext) -> Optional[str]:
    if ctx.lower != "there":
        return None
    if is_verb_tag(ctx.prev_tag):
        return "RB"
    if any(tag in {"VBP", "VBZ"} for tag in ctx.next_tags()):
        return "EX"
    return None


def to(ctx: TagContext) -> Optional[str]:
    if ctx.lower != "to":
        return None
    next_tags = ctx.next_tags()
    if "VB" in next_tags:
        return "TO"
    if any(tag == "DT" or is_noun_tag(tag) for tag in next_tags):
        return "IN"
    return None


def her(ctx: TagContext) -> Optional[str]:
    if ctx.lower != "her":
        return None
    if is_verb_tag(ctx.prev_tag):
        return "PRP"
    if any(is_noun_tag(tag) for tag in ctx.next_tags()):
        return "PRP$"
    return None


def that(ctx: TagContext) -> Optional[str]:
    if ctx.lower != "that":
        return None
    if ctx.prev_tag is None and ctx.next_word and any(is_noun_tag(t) for t in ctx.next_tags()):
        return "DT"
    if is_noun_tag(ctx.prev_tag):
        return "WDT"
    return None


def which(ctx: TagContext) -> Optional[str]:
    if ctx.lower == "which" and (ctx.prev_tag == "," or is_noun_tag(ctx.prev_tag)):
        return "WP"
    return None


# ---------------------------------------------------------------------------
# Modals, auxiliaries and copulas
# ---------------------------------------------------------------------------


def modal_before_verb(ctx: TagContext) -> Optional[str]:
    if ctx.has("MD") and ctx.next_word and "VB" in ctx.next_tags():
        return "MD"
    return None


def interjection(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag in {None, "``"} and ctx.next_word == "!" and not ctx.candidates:
        return "UH"
    return None


def adjective_before_comma(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag == "IN" and ctx.has("JJ") and ctx.next_word == ",":
        return "JJ"
    return None


def verb_after_to(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag == "TO" and ctx.has("VB"):
        return "VB"
    return None


def _after_modal(word: Optional[str], ctx: TagContext) -> Optional[str]:
    if _lower(word) == "'d" and ctx.has("VBN"):
        return "VBN"
    if ctx.has("VB"):
        return "VB"
    return None


def verb_after_modal(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag == "MD":
        return _after_modal(ctx.prev_word, ctx)
    return None


def verb_after_do(ctx: TagContext) -> Optional[str]:
    """``did (not) approve``: base verb after do-support."""

    if _lower(ctx.effective_prev_word) in DO_AUXILIARIES and ctx.has("VB"):
        return "VB"
    return None


def after_copula(ctx: TagContext) -> Optional[str]:
    """Adverb, then past participle (passive), then gerund, then adjective."""

    if ctx.prev_lower not in COPULAS:
        return None
    if ctx.has("RB") and ctx.next_word:
        next_tags = ctx.next_tags()
        if "JJ" in next_tags or "RB" in next_tags:
            return "RB"
    for tag in ("VBN", "VBG", "JJ"):
        if ctx.has(tag):
            return tag
    return None


def gerund_after_verb(ctx: TagContext) -> Optional[str]:
    if is_verb_tag(ctx.prev_tag) and ctx.has("VBG"):
        return "VBG"
    return None


def participle_after_auxiliary(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag in {"VBP", "VBZ", "VBD", "VBN"} and ctx.has("VBN"):
        return "VBN"
    return None


# ---------------------------------------------------------------------------
# Agreement and noun runs
# ---------------------------------------------------------------------------


def plural_subject_adverb_verb(ctx: TagContext) -> Optional[str]:
    if ctx.prev2_tag == "NNS" and ctx.prev_tag == "RB" and ctx.has("VBP"):
        return "VBP"
    return None


def singular_subject_adverb_verb(ctx: TagContext) -> Optional[str]:
    if ctx.prev2_tag in {"NN", "NNP"} and ctx.prev_tag == "RB" and ctx.has("VBZ"):
        return "VBZ"
    return None


def noun_after_determiner(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag == "DT" and ctx.has("NN"):
        return "NN"
    return None


def plural_compound_noun(ctx: TagContext) -> Optional[str]:
    """``data scripts``: a plural tail of a compound noun outranks a verb reading."""

    if ctx.has("NNS") and ctx.lower.endswith("s") and ctx.prev_tag in {"NN", "JJ"}:
        return "NNS"
    return None


def singular_subject_present(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag in {"NN", "NNP"} and ctx.has("VBZ"):
        return "VBZ"
    return None


def singular_subject_past(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag in {"NN", "NNP"} and ctx.has("VBD"):
        return "VBD"
    return None


def plural_subject_verb(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag != "NNS":
        return None
    if ctx.lower == "were" and ctx.has("VBD"):
        return "VBD"
    if ctx.has("VBP") or ctx.has("VB"):
        return "VBP"
    return None


def pronoun_subject_verb(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag != "PRP":
        return None
    if ctx.has("MD"):
        return "MD"
    if ctx.prev_lower in THIRD_PERSON_SINGULAR and ctx.has("VBZ"):
        return "VBZ"
    for tag in ("VBD", "VBP"):
        if ctx.has(tag):
            return tag
    return None


def proper_noun_run(ctx: TagContext) -> Optional[str]:
    if ctx.word[:1].isupper() and ctx.prev_tag in {"DT", "NNP"}:
        return "NNP"
    return None


def participle_as_adjective(ctx: TagContext) -> Optional[str]:
    """``the approved budget``; ``have been`` keeps its verb reading."""

    if not (ctx.has("VBG") or ctx.has("VBN")) or not ctx.next_word:
        return None
    if ctx.prev_lower in HAVE_AUXILIARIES:
        return None
    if any(is_noun_tag(tag) for tag in ctx.next_tags()):
        return "JJ"
    return None


def modal_after_subject(ctx: TagContext) -> Optional[str]:
    if ctx.lower not in COMMON_MODALS or not ctx.has("MD"):
        return None
    if ctx.prev_tag in {"NN", "NNS"} and ctx.next_word and "DT" in ctx.next_tags():
        return "MD"
    if ctx.prev_tag == "PRP":
        return "MD"
    return None


def compound_noun_tail(ctx: TagContext) -> Optional[str]:
    """After a noun: relative pronoun, then a verb before an object pronoun, else a noun."""

    if not is_noun_tag(ctx.prev_tag) or not (ctx.has("NNS") or ctx.has("NN")):
        return None
    if ctx.has("WP"):
        return "WP"
    if _lower(ctx.next_word) in OBJECT_PRONOUNS and ctx.has("VBZ"):
        return "VBZ"
    if ctx.lower in _COMPOUND_NOUN_VERB_EXCEPTIONS:
        return None
    return "NNS" if ctx.has("NNS") else "NN"


def preposition_lead_in(ctx: TagContext) -> Optional[str]:
    if ctx.has("IN") and ctx.next_word:
        if any(tag in {"DT", "JJ"} or is_noun_tag(tag) for tag in ctx.next_tags()):
            return "IN"
    return None


def noun_after_gerund(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag == "VBG" and ctx.has("NN"):
        return "NN"
    return None


def verb_after_negated_modal(ctx: TagContext) -> Optional[str]:
    """``will not go``: the modal rule, reading through the negation."""

    if ctx.effective_prev_tag == "MD":
        return _after_modal(ctx.effective_prev_word, ctx)
    return None


def determiner_after_verb(ctx: TagContext) -> Optional[str]:
    if ctx.prev_tag in VERB_TAGS and ctx.has("DT"):
        return "DT"
    return None


def adverb_after_finite_verb(ctx: TagContext) -> Optional[str]:
    if ctx.negated or is_auxiliary_or_modal(ctx.prev_tag, ctx.prev_word):
        return None
    if ctx.prev_tag in FINITE_VERB_TAGS and ctx.has("RB") and ctx.lower not in BE_FORMS:
        return "RB"
    return None


TAG_RULES: Tuple[TagRule, ...] = (
    TagRule("question-inversion", question_inversion),
    TagRule("comparative-after-copula", comparative_after_copula),
    TagRule("gerund-subject", gerund_subject),
    TagRule("there", there),
    TagRule("to", to),
    TagRule("her", her),
    TagRule("that", that),
    TagRule("which", which),
    TagRule("modal-before-verb", modal_before_verb),
    TagRule("interjection", interjection),
    TagRule("adjective-before-comma", adjective_before_comma),
    TagRule("verb-after-to", verb_after_to),
    TagRule("verb-after-modal", verb_after_modal),
    TagRule("verb-after-do", verb_after_do),
    TagRule("after-copula", after_copula),
    TagRule("gerund-after-verb", gerund_after_verb),
    TagRule("participle-after-auxiliary", participle_after_auxiliary),
    TagRule("plural-subject-adverb-verb", plural_subject_adverb_verb),
    TagRule("singular-subject-adverb-verb", singular_subject_adverb_verb),
    TagRule("noun-after-determiner", noun_after_determiner),
    TagRule("plural-compound-noun", plural_compound_noun),
    TagRule("singular-subject-present", singular_subject_present),
    TagRule("singular-subject-past", singular_subject_past),
    TagRule("plural-subject-verb", plural_subject_verb),
    TagRule("pronoun-subject-verb", pronoun_subject_verb),
    TagRule("proper-noun-run", proper_noun_run),
    TagRule("participle-as-adjective", participle_as_adjective),
    TagRule("modal-after-subject", modal_after_subject),
    TagRule("compound-noun-tail", compound_noun_tail),
    TagRule("preposition-lead-in", preposition_lead_in),
    TagRule("noun-after-gerund", noun_after_gerund),
    TagRule("verb-after-negated-modal", verb_after_negated_modal),
    TagRule("determiner-after-verb", determiner_after_verb),
    TagRule("adverb-after-finite-verb", adverb_after_finite_verb),
)


def apply_rules(ctx: TagContext, rules: Sequence[TagRule] = TAG_RULES) -> Optional[RuleHit]:
    """Return the first rule hit for ``ctx`` or ``None``."""

    for rule in rules:
        tag = rule.apply(ctx)
        if tag is not None:
            LOGGER.debug("rule %s tagged %r as %s", rule.name, ctx.word, tag)
            return RuleHit(tag, rule.name)
    return None


__all__ = [
    "TAG_RULES",
    "RuleHit",
    "TagContext",
    "TagRule",
    "apply_rules",
    "is_auxiliary_or_modal",
]
