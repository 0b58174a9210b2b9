"""Settings for the linker, the concept deduplicator and the analyzer.

Defaults live in ``concretize/data/config.yaml``. A second YAML file named by
the ``CONCRETIZE_CONFIG`` environment variable (or passed to
:func:`load_settings`) is merged over them one section at a time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_CONFIG_PATH = DATA_DIR / "config.yaml"
CONFIG_ENV_VAR = "CONCRETIZE_CONFIG"


@dataclass(frozen=True)
class WikidataSettings:
    endpoint: str = "https://www.wikidata.org/w/api.php"
    entity_prefix: str = "http://www.wikidata.org/entity/"
    timeout: float = 10.0
    user_agent: str = "concretize/0.1 (concept linking)"
    cache_size: int = 4096
    cache_ttl: Optional[float] = 3600.0


@dataclass(frozen=True)
class LinkerSettings:
    """Scoring weights for :class:`~concretize.ontology.linker.EntityLinker`."""

    max_candidates: int = 7
    max_workers: int = 7
    label_weight: float = 10.0
    description_weight: float = 3.0
    description_bonus: float = 1.0
    resonance_weight: float = 15.0
    mismatch_penalty: float = 20.0
    match_bonus: float = 10.0
    confidence_floor: float = 12.0
    type_properties: Tuple[str, ...] = ("P31", "P279")
    action_types: FrozenSet[str] = frozenset({"Q402629", "Q3249551", "Q1656682"})
    object_types: FrozenSet[str] = frozenset(
        {
            "Q488383",
            "Q223557",
            "Q4406616",
            "Q7184903",
            "Q483247",
            "Q11262",
            "Q39546",
            "Q1183543",
            "Q212437",
            "Q386724",
            "Q15401930",
            "Q235557",
        }
    )


@dataclass(frozen=True)
class GDCSettings:
    base_iri: str = "http://purl.obolibrary.org/obo/BFO_0000031"
    type_iri: str = "http://purl.obolibrary.org/obo/BFO_0000031"
    backlink_property: str = "http://purl.obolibrary.org/obo/BFO_0000176"
    label_property: str = "http://www.w3.org/2000/01/rdf-schema#label"
    text_properties: Tuple[str, ...] = (
        "https://www.commoncoreontologies.org/ont00001761",
        "http://www.w3.org/2000/01/rdf-schema#label",
        "http://purl.org/dc/terms/description",
        "http://www.w3.org/2000/01/rdf-schema#comment",
    )
    excluded_types: Tuple[str, ...] = ("https://www.commoncoreontologies.org/ont00001262",)
    shared_key_markers: Tuple[str, ...] = ("/Person_", "/EmailAddress_", "/role_")
    bookkeeping_keys: Tuple[str, ...] = ("sync_state",)


@dataclass(frozen=True)
class AnalyzerSettings:
    max_workers: int = 8


@dataclass(frozen=True)
class Settings:
    wikidata: WikidataSettings = field(default_factory=WikidataSettings)
    linker: LinkerSettings = field(default_factory=LinkerSettings)
    gdc: GDCSettings = field(default_factory=GDCSettings)
    analyzer: AnalyzerSettings = field(default_factory=AnalyzerSettings)


_SECTIONS = {
    "wikidata": WikidataSettings,
    "linker": LinkerSettings,
    "gdc": GDCSettings,
    "analyzer": AnalyzerSettings,
}


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return dict(data)


def _coerce(template: Any, value: Any) -> Any:
    if isinstance(template, frozenset):
        return frozenset(value)
    if isinstance(template, tuple):
        return tuple(value)
    return value


def _apply_section(current: Any, name: str, raw: Any) -> Any:
    if raw is None:
        return current
    if not isinstance(raw, Mapping):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    known = {f.name for f in fields(current)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown settings in '{name}': {', '.join(unknown)}")
    updates = {key: _coerce(getattr(current, key), value) for key, value in raw.items()}
    return replace(current, **updates)


def settings_from_mapping(data: Mapping[str, Any], base: Settings | None = None) -> Settings:
    """Overlay ``data`` on ``base`` (or the built-in defaults)."""

    settings = base or Settings()
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(unknown)}")
    updates = {
        name: _apply_section(getattr(settings, name), name, data.get(name))
        for name in _SECTIONS
        if name in data
    }
    return replace(settings, **updates)


@lru_cache(maxsize=None)
def _load(path: Optional[str]) -> Settings:
    settings = settings_from_mapping(_read_yaml(DEFAULT_CONFIG_PATH))
    if path is not None:
        settings = settings_from_mapping(_read_yaml(Path(path)), settings)
    return settings


def load_settings(path: str | Path | None = None) -> Settings:
    """Return settings from the packaged defaults and an optional override file."""

    override = path or os.environ.get(CONFIG_ENV_VAR)
    return _load(str(override) if override else None)


__all__ = [
    "AnalyzerSettings",
    "CONFIG_ENV_VAR",
    "GDCSettings",
    "LinkerSettings",
    "Settings",
    "WikidataSettings",
    "load_settings",
    "settings_from_mapping",
]
