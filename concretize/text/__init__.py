"""Text utilities: tokenisation, lemmatisation, acronyms and sentences."""

from .acronyms import extract_acronyms, strip_acronym_expansions
from .lemmatizer import Lemmatizer, lemmatize, lemmatize_word
from .tokenize import Token, normalize, tokenize

__all__ = [
    "Lemmatizer",
    "Token",
    "extract_acronyms",
    "lemmatize",
    "lemmatize_word",
    "normalize",
    "strip_acronym_expansions",
    "tokenize",
]
