"""Reconcile concept nodes with the persisted node store."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import GDCSettings
from ..errors import PersistenceError
from ..storage.store import NodeStore
from .models import ConceptNode
from .service import GDCService

LOGGER = logging.getLogger(__name__)

Node = Mapping[str, Any]


@dataclass
class ReconcileResult:
    """Keys written and keys removed by one reconciliation."""

    upserted: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    concepts: List[ConceptNode] = field(default_factory=list)


def _unique_suffix(source_id: str) -> str:
    """``.../DSQ_abc123`` -> ``abc123``: the token shared by a source's child keys."""

    return source_id.rstrip("/").split("/")[-1].split("_")[-1]


class GDCManager:
    """Recompute concept nodes for a corpus and apply them in one transaction.

    Parameters
    ----------
    store:
        The persisted node store.
    service:
        Concept miner; built from ``settings`` when omitted.
    """

    def __init__(
        self,
        store: NodeStore,
        service: Optional[GDCService] = None,
        settings: Optional[GDCSettings] = None,
    ):
        self.store = store
        self.settings = settings or (service.settings if service else GDCSettings())
        self.service = service or GDCService(settings=self.settings)

    # ------------------------------------------------------------------
    def is_concept_key(self, key: str) -> bool:
        return key.startswith(self.settings.base_iri)

    def source_nodes(self, nodes: Iterable[Node]) -> List[Node]:
        """Drop previously minted concept nodes so they are never mined as sources."""

        return [n for n in nodes if not self.is_concept_key(str(n.get("@id", "")))]

    def owned_child_keys(self, keys: Iterable[str], source_id: str) -> List[str]:
        """Keys created for ``source_id`` that are not shared with other sources."""

        marker = f"_{_unique_suffix(source_id)}_"
        owned = []
        for key in keys:
            if marker not in key or key == source_id:
                continue
            if key in self.settings.bookkeeping_keys or self.is_concept_key(key):
                continue
            if any(shared in key for shared in self.settings.shared_key_markers):
                continue
            owned.append(key)
        return owned

    # ------------------------------------------------------------------
    def update_and_save(
        self,
        nodes_to_upsert: Sequence[Node],
        all_nodes: Sequence[Node],
        updated_source_id: Optional[str] = None,
    ) -> ReconcileResult:
        """Upsert ``nodes_to_upsert`` and reconcile concepts over the merged corpus.

        ``all_nodes`` is the caller's current view of every source node. When
        ``updated_source_id`` names a re-processed source, its previously
        owned child records are removed before the new ones are written.
        """

        upsert_ids = {node.get("@id") for node in nodes_to_upsert}
        corpus = [n for n in self.source_nodes(all_nodes) if n.get("@id") not in upsert_ids]
        corpus += list(nodes_to_upsert)
        concepts = self.service.process(corpus)
        owners = [updated_source_id] if updated_source_id else []
        return self._reconcile("update_and_save", nodes_to_upsert, concepts, owners, [])

    def remove_and_save(self, source_ids: Sequence[str], all_nodes: Sequence[Node]) -> ReconcileResult:
        """Delete ``source_ids`` (and their owned children) and reconcile concepts."""

        removed = set(source_ids)
        corpus = [n for n in self.source_nodes(all_nodes) if n.get("@id") not in removed]
        concepts = self.service.process(corpus)
        return self._reconcile("remove_and_save", [], concepts, list(source_ids), list(source_ids))

    def _reconcile(
        self,
        operation: str,
        sources: Sequence[Node],
        concepts: List[ConceptNode],
        owners: Sequence[str],
        removed_sources: Sequence[str],
    ) -> ReconcileResult:
        concept_ids = {c.identifier for c in concepts}
        result = ReconcileResult(concepts=concepts)
        try:
            with self.store.transaction() as txn:
                keys = txn.keys()
                doomed: Dict[str, None] = {}
                for key in keys:
                    if self.is_concept_key(key) and key not in concept_ids:
                        doomed[key] = None
                for owner in owners:
                    for key in self.owned_child_keys(keys, owner):
                        doomed[key] = None
                existing = set(keys)
                for source_id in removed_sources:
                    if source_id in existing:
                        doomed[source_id] = None
                for key in doomed:
                    txn.delete(key)
                for node in sources:
                    txn.put(str(node["@id"]), dict(node))
                    result.upserted.append(str(node["@id"]))
                for concept in concepts:
                    txn.put(concept.identifier, concept.to_jsonld(self.settings))
                    result.upserted.append(concept.identifier)
                result.deleted = list(doomed)
        except sqlite3.Error as exc:
            LOGGER.error("%s transaction failed: %s", operation, exc)
            raise PersistenceError(operation, str(exc)) from exc
        LOGGER.info(
            "%s: upserted %d nodes, deleted %d", operation, len(result.upserted), len(result.deleted)
        )
        return result


__all__ = ["GDCManager", "ReconcileResult"]
