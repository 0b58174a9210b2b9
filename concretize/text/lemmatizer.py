"""Rule-based lemmatisation for English nouns and verbs."""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Mapping, Optional

_VOWELS = "aeiou"

INVARIABLE_NOUNS: FrozenSet[str] = frozenset(
    {
        "aircraft",
        "barracks",
        "billiards",
        "bison",
        "chinese",
        "cod",
        "crossroads",
        "deer",
        "fish",
        "gallows",
        "headquarters",
        "hovercraft",
        "japanese",
        "mathematics",
        "means",
        "moose",
        "news",
        "physics",
        "portuguese",
        "salmon",
        "series",
        "sheep",
        "shrimp",
        "spacecraft",
        "species",
        "squid",
        "swiss",
        "trout",
        "vietnamese",
        "watercraft",
    }
)

IRREGULAR_NOUNS: Dict[str, str] = {
    "men": "man",
    "women": "woman",
    "feet": "foot",
    "teeth": "tooth",
    "geese": "goose",
    "mice": "mouse",
    "lice": "louse",
    "children": "child",
    "oxen": "ox",
    "people": "person",
    "cacti": "cactus",
    "fungi": "fungus",
    "stimuli": "stimulus",
    "syllabi": "syllabus",
    "alumni": "alumnus",
    "algae": "alga",
    "larvae": "larva",
    "vertebrae": "vertebra",
    "criteria": "criterion",
    "phenomena": "phenomenon",
    "appendices": "appendix",
    "indices": "index",
    "matrices": "matrix",
    "analyses": "analysis",
    "axes": "axis",
    "bases": "basis",
    "crises": "crisis",
    "diagnoses": "diagnosis",
    "ellipses": "ellipsis",
    "oases": "oasis",
    "theses": "thesis",
    "dice": "die",
}

IRREGULAR_VERBS: Dict[str, str] = {
    "am": "be",
    "is": "be",
    "are": "be",
    "was": "be",
    "were": "be",
    "been": "be",
    "being": "be",
    "has": "have",
    "having": "have",
    "had": "have",
    "does": "do",
    "doing": "do",
    "did": "do",
    "done": "do",
    "arisen": "arise",
    "arose": "arise",
    "ate": "eat",
    "awoke": "awake",
    "awoken": "awake",
    "began": "begin",
    "begun": "begin",
    "bent": "bend",
    "bet": "bet",
    "bit": "bite",
    "bitten": "bite",
    "blew": "blow",
    "blown": "blow",
    "broke": "break",
    "broken": "break",
    "brought": "bring",
    "built": "build",
    "burst": "burst",
    "bought": "buy",
    "cast": "cast",
    "caught": "catch",
    "chose": "choose",
    "chosen": "choose",
    "came": "come",
    "cost": "cost",
    "cut": "cut",
    "dealt": "deal",
    "drew": "draw",
    "drawn": "draw",
    "drank": "drink",
    "driven": "drive",
    "drove": "drive",
    "drunk": "drink",
    "eaten": "eat",
    "fell": "fall",
    "fallen": "fall",
    "felt": "feel",
    "fit": "fit",
    "flew": "fly",
    "flown": "fly",
    "forgot": "forget",
    "forgotten": "forget",
    "fought": "fight",
    "found": "find",
    "froze": "freeze",
    "frozen": "freeze",
    "gave": "give",
    "given": "give",
    "going": "go",
    "gone": "go",
    "went": "go",
    "got": "get",
    "gotten": "get",
    "getting": "get",
    "grew": "grow",
    "grown": "grow",
    "hung": "hang",
    "heard": "hear",
    "held": "hold",
    "hurt": "hurt",
    "kept": "keep",
    "knew": "know",
    "known": "know",
    "laid": "lay",
    "led": "lead",
    "left": "leave",
    "lent": "lend",
    "let": "let",
    "lost": "lose",
    "made": "make",
    "making": "make",
    "meant": "mean",
    "met": "meet",
    "paid": "pay",
    "put": "put",
    "quit": "quit",
    "ran": "run",
    "rang": "ring",
    "ridden": "ride",
    "rode": "ride",
    "rung": "ring",
    "said": "say",
    "saying": "say",
    "sang": "sing",
    "sank": "sink",
    "sat": "sit",
    "saw": "see",
    "seen": "see",
    "sent": "send",
    "set": "set",
    "shot": "shoot",
    "shut": "shut",
    "slept": "sleep",
    "sold": "sell",
    "sought": "seek",
    "spoke": "speak",
    "spoken": "speak",
    "spent": "spend",
    "spread": "spread",
    "stood": "stand",
    "stole": "steal",
    "stolen": "steal",
    "sung": "sing",
    "sunk": "sink",
    "swam": "swim",
    "swum": "swim",
    "taught": "teach",
    "taken": "take",
    "taking": "take",
    "took": "take",
    "threw": "throw",
    "thrown": "throw",
    "thought": "think",
    "told": "tell",
    "understood": "understand",
    "won": "win",
    "woke": "wake",
    "woken": "wake",
    "wore": "wear",
    "worn": "wear",
    "wrote": "write",
    "written": "write",
}

_ACRONYM_RE = re.compile(r"^[A-Z][A-Z0-9]+$")
_SIBILANT_ES_RE = re.compile(r"(?:s|x|z|ch|sh)es$")


def _is_acronym(word: str) -> bool:
    return bool(_ACRONYM_RE.match(word))


class Lemmatizer:
    """Reduce inflected words to a base form using tables and suffix rules.

    Parameters
    ----------
    nouns, verbs:
        Extra irregular forms merged over the built-in tables.
    """

    def __init__(
        self,
        nouns: Optional[Mapping[str, str]] = None,
        verbs: Optional[Mapping[str, str]] = None,
    ):
        self.invariable_nouns = INVARIABLE_NOUNS
        self.irregular_nouns = {**IRREGULAR_NOUNS, **{k.lower(): v.lower() for k, v in (nouns or {}).items()}}
        self.irregular_verbs = {**IRREGULAR_VERBS, **{k.lower(): v.lower() for k, v in (verbs or {}).items()}}
        # Base forms named by the tables are never reduced further.
        self._known_lemmas = frozenset(self.irregular_nouns.values()) | frozenset(
            self.irregular_verbs.values()
        )

    def lemmatize(self, phrase: str) -> str:
        """Lemmatise the final word of ``phrase``; earlier words are kept as-is."""

        if not phrase or not isinstance(phrase, str):
            return ""
        words = phrase.split()
        if not words:
            return ""
        words[-1] = self.lemmatize_word(words[-1])
        return " ".join(words)

    def lemmatize_word(self, word: str) -> str:
        """Return the base form of a single ``word``.

        Upper-case acronyms such as ``FDA`` are returned unchanged. Otherwise
        the word is lower-cased and reduced until no rule applies, so the
        result is always its own lemma.
        """

        if _is_acronym(word):
            return word
        current = word.lower()
        while True:
            reduced = self._reduce(current)
            if reduced == current:
                return current
            current = reduced

    # ------------------------------------------------------------------
    def _reduce(self, word: str) -> str:
        if word in self.invariable_nouns or word in self._known_lemmas:
            return word
        if word in self.irregular_nouns:
            return self.irregular_nouns[word]
        if word in self.irregular_verbs:
            return self.irregular_verbs[word]

        if word.endswith("ies") and len(word) > 3:
            return word[:-3] + "y"
        if word.endswith("ves") and len(word) > 3:
            return word[:-1]
        if _SIBILANT_ES_RE.search(word) and len(word) > 4:
            return word[:-2]
        if word.endswith("s") and len(word) > 2 and not word.endswith(("ss", "us", "is")):
            return word[:-1]

        if word.endswith(("ing", "ed")):
            return self._strip_verbal_suffix(word)
        return word

    @staticmethod
    def _strip_verbal_suffix(word: str) -> str:
        stem = word[:-3] if word.endswith("ing") else word[:-2]
        # "bring", "sing", "string": the "stem" is not a real stem.
        if len(stem) < 3 or not any(ch in _VOWELS for ch in stem):
            return word
        last, before, third = stem[-1], stem[-2], stem[-3]
        if last == before and last not in _VOWELS and third in _VOWELS:
            return stem[:-1]
        if last == "i":
            return stem[:-1] + "y"
        if last not in _VOWELS and before in _VOWELS and third not in _VOWELS and last not in "wxy":
            return stem + "e"
        return stem


_DEFAULT = Lemmatizer()


def lemmatize(phrase: str) -> str:
    """Lemmatise ``phrase`` with the shared default :class:`Lemmatizer`."""

    return _DEFAULT.lemmatize(phrase)


def lemmatize_word(word: str) -> str:
    return _DEFAULT.lemmatize_word(word)


__all__ = [
    "INVARIABLE_NOUNS",
    "IRREGULAR_NOUNS",
    "IRREGULAR_VERBS",
    "Lemmatizer",
    "lemmatize",
    "lemmatize_word",
]
