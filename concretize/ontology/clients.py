"""Wikidata search and entity fetch client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..config import WikidataSettings
from ..errors import ExternalLookupError
from .cache import BoundedCache

LOGGER = logging.getLogger(__name__)

# wbgetentities accepts at most 50 ids per request.
MAX_IDS_PER_REQUEST = 50


@dataclass(frozen=True)
class SearchHit:
    """One ``wbsearchentities`` result."""

    id: str
    label: str
    description: Optional[str] = None
    concept_uri: Optional[str] = None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _hit_from_entry(entry: Dict[str, Any]) -> Optional[SearchHit]:
    identifier = entry.get("id")
    if not isinstance(identifier, str) or not identifier:
        return None
    return SearchHit(
        id=identifier,
        label=_text(entry.get("label")) or "",
        description=_text(entry.get("description")),
        concept_uri=_text(entry.get("concepturi")),
    )


class WikidataClient:
    """Thin, cached wrapper over the Wikidata ``api.php`` endpoint.

    Parameters
    ----------
    session:
        A :class:`requests.Session` (or compatible object); one is created
        when omitted.
    settings:
        Endpoint, timeout, user agent and cache sizing.
    cache:
        Shared response cache; built from ``settings`` when omitted.

    Network faults, HTTP errors and malformed payloads are raised as
    :class:`~concretize.errors.ExternalLookupError`.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        settings: Optional[WikidataSettings] = None,
        cache: Optional[BoundedCache] = None,
    ):
        self.settings = settings or WikidataSettings()
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else BoundedCache(
            max_size=self.settings.cache_size, ttl=self.settings.cache_ttl
        )

    # ------------------------------------------------------------------
    def _request(self, operation: str, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {"format": "json", "language": "en", **params}
        try:
            response = self.session.get(
                self.settings.endpoint,
                params=query,
                timeout=self.settings.timeout,
                headers={"User-Agent": self.settings.user_agent},
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise ExternalLookupError(operation, str(exc)) from exc
        except ValueError as exc:
            raise ExternalLookupError(operation, f"invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ExternalLookupError(operation, "response is not a JSON object")
        if "error" in payload:
            error = payload["error"]
            info = error.get("info") if isinstance(error, dict) else error
            raise ExternalLookupError(operation, str(info))
        return payload

    def search(self, term: str) -> List[SearchHit]:
        """Return ``wbsearchentities`` hits for ``term`` (cached per term)."""

        key = ("search", term)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        payload = self._request("search", {"action": "wbsearchentities", "search": term})
        entries = payload.get("search", [])
        if not isinstance(entries, list):
            raise ExternalLookupError("search", "'search' is not a list")
        hits = [hit for hit in (_hit_from_entry(e) for e in entries if isinstance(e, dict)) if hit]
        self.cache.set(key, hits)
        LOGGER.debug("search %r returned %d hits", term, len(hits))
        return hits

    def get_entities(self, ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """Return entity documents (labels, descriptions, claims) keyed by id.

        Only ids missing from the cache are fetched. Ids the service reports
        as missing are left out of the result.
        """

        wanted = list(dict.fromkeys(i for i in ids if i))
        found: Dict[str, Dict[str, Any]] = {}
        uncached: List[str] = []
        for identifier in wanted:
            cached = self.cache.get(("entity", identifier))
            if cached is None:
                uncached.append(identifier)
            else:
                found[identifier] = cached

        for start in range(0, len(uncached), MAX_IDS_PER_REQUEST):
            batch = uncached[start : start + MAX_IDS_PER_REQUEST]
            payload = self._request(
                "get_entities",
                {
                    "action": "wbgetentities",
                    "ids": "|".join(batch),
                    "props": "labels|descriptions|claims",
                    "languages": "en",
                },
            )
            entities = payload.get("entities", {})
            if not isinstance(entities, dict):
                raise ExternalLookupError("get_entities", "'entities' is not an object")
            for identifier, entity in entities.items():
                if not isinstance(entity, dict) or "missing" in entity:
                    continue
                self.cache.set(("entity", identifier), entity)
                found[identifier] = entity
        return found

    def entity_iri(self, identifier: str) -> str:
        return f"{self.settings.entity_prefix}{identifier}"


__all__ = ["MAX_IDS_PER_REQUEST", "SearchHit", "WikidataClient"]
