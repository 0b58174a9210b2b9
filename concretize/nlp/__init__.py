"""Part-of-speech tagging and chunking."""

from .chunker import Chunk, chunk
from .lexicon import Lexicon, default_lexicon
from .tagger import POSTagger, QuoteState
from .taxonomy import ChunkType, TaggedWord

__all__ = [
    "Chunk",
    "ChunkType",
    "Lexicon",
    "POSTagger",
    "QuoteState",
    "TaggedWord",
    "chunk",
    "default_lexicon",
]
