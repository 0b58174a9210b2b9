"""Deterministic, explainable part-of-speech tagger.

Tokens are tagged left to right by escalating strategy: contraction table,
literal punctuation and quote classes, possessives, the ordered contextual
rules in :mod:`concretize.nlp.tag_rules`, suffix heuristics for unknown words
and finally a lexicon/capitalisation fallback. Every token gets one tag.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..text.tokenize import tokenize
from .lexicon import Lexicon, default_lexicon
from .tag_rules import TAG_RULES, TagContext, TagRule, apply_rules
from .taxonomy import CLOSE_QUOTE, OPEN_QUOTE, TaggedWord

LOGGER = logging.getLogger(__name__)

# Lower-case contraction -> ((part, tag), ...).
CONTRACTIONS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "don't": (("do", "VB"), ("not", "RB")),
    "doesn't": (("does", "VBZ"), ("not", "RB")),
    "didn't": (("did", "VBD"), ("not", "RB")),
    "can't": (("ca", "MD"), ("not", "RB")),
    "won't": (("will", "MD"), ("not", "RB")),
    "couldn't": (("could", "MD"), ("not", "RB")),
    "shouldn't": (("should", "MD"), ("not", "RB")),
    "wouldn't": (("would", "MD"), ("not", "RB")),
    "isn't": (("is", "VBZ"), ("not", "RB")),
    "aren't": (("are", "VBP"), ("not", "RB")),
    "wasn't": (("was", "VBD"), ("not", "RB")),
    "weren't": (("were", "VBD"), ("not", "RB")),
    "they're": (("they", "PRP"), ("are", "VBP")),
    "we're": (("we", "PRP"), ("are", "VBP")),
    "you're": (("you", "PRP"), ("are", "VBP")),
    "i'm": (("I", "PRP"), ("am", "VBP")),
    "i've": (("I", "PRP"), ("have", "VBP")),
    "i'll": (("I", "PRP"), ("will", "MD")),
    "i'd": (("I", "PRP"), ("would", "MD")),
    "he'd": (("he", "PRP"), ("would", "MD")),
    "she'd": (("she", "PRP"), ("would", "MD")),
    "he's": (("he", "PRP"), ("is", "VBZ")),
    "she's": (("she", "PRP"), ("is", "VBZ")),
    "it's": (("it", "PRP"), ("is", "VBZ")),
    "she'll": (("she", "PRP"), ("will", "MD")),
    "he'll": (("he", "PRP"), ("will", "MD")),
    "it'll": (("it", "PRP"), ("will", "MD")),
    "you'll": (("you", "PRP"), ("will", "MD")),
    "you've": (("you", "PRP"), ("have", "VBP")),
    "we've": (("we", "PRP"), ("have", "VBP")),
    "they've": (("they", "PRP"), ("have", "VBP")),
    "what's": (("what", "WP"), ("is", "VBZ")),
    "that's": (("that", "DT"), ("is", "VBZ")),
    "where's": (("where", "WRB"), ("is", "VBZ")),
    "there's": (("there", "EX"), ("is", "VBZ")),
}

_ELLIPSES = frozenset({"...", "…"})
_PUNCTUATION_TAGS = {
    ".": ".",
    "!": ".",
    "?": ".",
    ",": ",",
    ":": ":",
    ";": ":",
    "(": "PRN",
    ")": "PRN",
}
_DOUBLE_QUOTES = frozenset({'"', "“", "”"})
_SINGLE_QUOTES = frozenset({"'", "`"})
_NUMBER_RE = re.compile(r"^\d+(?:[.,]\d+)*$")

_SUFFIX_TAGS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("ing",), ("VBG", "NN")),
    (("ed",), ("VBD", "VBN")),
    (("ly",), ("RB",)),
)
_ADJECTIVE_SUFFIXES = ("able", "ible", "ous", "ful", "less")
_VERB_SUFFIXES = ("ize", "ify")


class QuoteState:
    """Open/closed toggles for single and double quotes.

    The state carries over between sentences, so one instance should be
    scoped to one document or session.
    """

    def __init__(self, single_open: bool = True, double_open: bool = True):
        self.single_open = single_open
        self.double_open = double_open

    def tag(self, mark: str) -> str:
        """Return the opening or closing quote tag for ``mark`` and flip the toggle."""

        if mark in _DOUBLE_QUOTES:
            opening = self.double_open
            self.double_open = not opening
        else:
            opening = self.single_open
            self.single_open = not opening
        return OPEN_QUOTE if opening else CLOSE_QUOTE

    def reset(self) -> None:
        self.single_open = True
        self.double_open = True

    def copy(self) -> "QuoteState":
        return QuoteState(self.single_open, self.double_open)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuoteState):
            return NotImplemented
        return (self.single_open, self.double_open) == (other.single_open, other.double_open)

    def __repr__(self) -> str:
        return f"QuoteState(single_open={self.single_open}, double_open={self.double_open})"


@dataclass(frozen=True)
class TagDecision:
    """A tagged word together with the strategy that chose its tag."""

    word: str
    tag: str
    source: str

    def tagged_word(self) -> TaggedWord:
        return TaggedWord(self.word, self.tag)


def _apply_casing(original: str, part: str) -> str:
    first = original[:1]
    if first and first.isupper() and part[:1].isalpha():
        return part[:1].upper() + part[1:]
    return part


def expand_contractions(tokens: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
    """Expand contractions into ``(word, preassigned_tag)`` pairs."""

    expanded: List[Tuple[str, Optional[str]]] = []
    for token in tokens:
        entry = CONTRACTIONS.get(token.lower())
        if entry is None:
            expanded.append((token, None))
            continue
        for position, (part, tag) in enumerate(entry):
            word = _apply_casing(token, part) if position == 0 else part
            expanded.append((word, tag))
    return expanded


class POSTagger:
    """Rule-based part-of-speech tagger.

    Parameters
    ----------
    lexicon:
        Candidate tags per word; defaults to the packaged English lexicon.
    rules:
        Ordered contextual rules; defaults to :data:`~concretize.nlp.tag_rules.TAG_RULES`.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        rules: Sequence[TagRule] = TAG_RULES,
    ):
        self.lexicon = lexicon if lexicon is not None else default_lexicon()
        self.rules = tuple(rules)
        self.quote_state = QuoteState()

    def reset_quotes(self) -> None:
        self.quote_state.reset()

    # ------------------------------------------------------------------
    def tag(self, sentence: str, quote_state: Optional[QuoteState] = None) -> List[TaggedWord]:
        """Tokenise and tag ``sentence``.

        ``quote_state`` scopes quote toggling to the caller; when omitted the
        tagger's own state is used and carries over between calls.
        """

        return [d.tagged_word() for d in self.trace(sentence, quote_state)]

    def tag_tokens(
        self, words: Sequence[str], quote_state: Optional[QuoteState] = None
    ) -> List[TaggedWord]:
        return [d.tagged_word() for d in self._decide(words, quote_state)]

    def trace(self, sentence: str, quote_state: Optional[QuoteState] = None) -> List[TagDecision]:
        """Tag ``sentence`` and report which strategy produced each tag."""

        return self._decide([token.text for token in tokenize(sentence)], quote_state)

    # ------------------------------------------------------------------
    def _decide(
        self, words: Sequence[str], quote_state: Optional[QuoteState]
    ) -> List[TagDecision]:
        state = quote_state if quote_state is not None else self.quote_state
        expanded = expand_contractions(words)
        decisions: List[TagDecision] = []
        for index, (word, preset) in enumerate(expanded):
            if preset is not None:
                decisions.append(TagDecision(word, preset, "contraction"))
                continue
            literal = self._literal_tag(word, state)
            if literal is not None:
                decisions.append(TagDecision(word, literal, "literal"))
                continue
            if word.endswith(("'s", "s'")):
                decisions.append(TagDecision(word, "POS", "possessive"))
                continue

            ctx = TagContext(
                word=word,
                index=index,
                candidates=self.lexicon.tags(word),
                lexicon=self.lexicon,
                prev_word=expanded[index - 1][0] if index > 0 else None,
                prev_tag=decisions[index - 1].tag if index > 0 else None,
                prev2_word=expanded[index - 2][0] if index > 1 else None,
                prev2_tag=decisions[index - 2].tag if index > 1 else None,
                next_word=expanded[index + 1][0] if index + 1 < len(expanded) else None,
            )
            hit = apply_rules(ctx, self.rules)
            if hit is not None:
                decisions.append(TagDecision(word, hit.tag, hit.rule))
                continue
            if not ctx.candidates:
                guesses = self.suffix_tags(word)
                if guesses:
                    decisions.append(TagDecision(word, guesses[0], "suffix"))
                    continue
            decisions.append(TagDecision(word, self._fallback(ctx), "fallback"))
        return decisions

    @staticmethod
    def _literal_tag(word: str, state: QuoteState) -> Optional[str]:
        if word in _ELLIPSES:
            return "ELL"
        if word in _PUNCTUATION_TAGS:
            return _PUNCTUATION_TAGS[word]
        if word in _DOUBLE_QUOTES or word in _SINGLE_QUOTES:
            return state.tag(word)
        return None

    def suffix_tags(self, word: str) -> Tuple[str, ...]:
        """Guess candidate tags for a word missing from the lexicon."""

        if word in self.lexicon:
            return ()
        lower = word.lower()
        for suffixes, tags in _SUFFIX_TAGS:
            if lower.endswith(suffixes):
                return tags
        if lower.endswith("s") and len(lower) > 2:
            return ("NNS", "VBZ")
        if lower.endswith(_ADJECTIVE_SUFFIXES):
            return ("JJ",)
        if lower.endswith(_VERB_SUFFIXES):
            return ("VB",)
        if _NUMBER_RE.match(lower):
            return ("CD",)
        return ()

    @staticmethod
    def _fallback(ctx: TagContext) -> str:
        if ctx.candidates:
            return ctx.candidates[0]
        if ctx.word[:1].isupper() and ctx.index > 0:
            return "NNP"
        return "NN"


__all__ = ["CONTRACTIONS", "POSTagger", "QuoteState", "TagDecision", "expand_contractions"]
