"""Concept deduplication across source documents."""

from .manager import GDCManager, ReconcileResult
from .models import ConceptNode, SourceNode, concept_identifier
from .service import GDCService

__all__ = [
    "ConceptNode",
    "GDCManager",
    "GDCService",
    "ReconcileResult",
    "SourceNode",
    "concept_identifier",
]
