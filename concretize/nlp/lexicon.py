"""Word to candidate part-of-speech tag mapping used by the tagger."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Tuple, Union

import yaml

DEFAULT_LEXICON_PATH = Path(__file__).resolve().parents[1] / "data" / "lexicon.json"

TagValue = Union[str, Iterable[str]]


def _coerce_tags(word: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(tag, str) for tag in value):
        return tuple(value)
    raise TypeError(f"Unsupported lexicon entry for '{word}': {value!r}")


def _load_raw(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            data = json.load(handle)
        elif path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(handle)
        else:
            raise ValueError(f"Unsupported lexicon format: {path.suffix}")
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError("Lexicon file must contain a mapping of words to tags")
    # Files may nest entries under an "entries" key next to metadata.
    if "entries" in data and isinstance(data["entries"], Mapping):
        return dict(data["entries"])
    return dict(data)


class Lexicon(Mapping[str, Tuple[str, ...]]):
    """Case-insensitive mapping from a word to its ordered candidate tags.

    The first candidate is the tagger's fallback when no rule decides.
    """

    def __init__(self, entries: Mapping[str, TagValue] | None = None):
        self._entries: Dict[str, Tuple[str, ...]] = {}
        for word, value in (entries or {}).items():
            self._entries[word.lower()] = _coerce_tags(word, value)

    @classmethod
    def from_path(cls, path: str | Path) -> "Lexicon":
        return cls(_load_raw(Path(path)))

    def tags(self, word: str | None) -> Tuple[str, ...]:
        """Return candidate tags for ``word`` or an empty tuple."""

        if not word:
            return ()
        return self._entries.get(word.lower(), ())

    def merged(self, extra: Mapping[str, TagValue]) -> "Lexicon":
        """Return a new lexicon with ``extra`` entries replacing existing ones."""

        combined: Dict[str, TagValue] = dict(self._entries)
        combined.update({word.lower(): value for word, value in extra.items()})
        return Lexicon(combined)

    def __getitem__(self, word: str) -> Tuple[str, ...]:
        return self._entries[word.lower()]

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache(maxsize=1)
def default_lexicon() -> Lexicon:
    """Return the packaged English lexicon."""

    return Lexicon.from_path(DEFAULT_LEXICON_PATH)


__all__ = ["DEFAULT_LEXICON_PATH", "Lexicon", "default_lexicon"]
