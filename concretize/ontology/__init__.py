"""Wikidata lookups and entity linking."""

from .cache import BoundedCache
from .clients import SearchHit, WikidataClient
from .linker import EntityLinker, LinkContext, LinkedEntity

__all__ = [
    "BoundedCache",
    "EntityLinker",
    "LinkContext",
    "LinkedEntity",
    "SearchHit",
    "WikidataClient",
]
