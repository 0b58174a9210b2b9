"""Dependency edges and the rule-based parser."""

from .models import DependencyEdge, dedupe_edges, format_edges
from .parser import DependencyParser, propagate_coordination

__all__ = [
    "DependencyEdge",
    "DependencyParser",
    "dedupe_edges",
    "format_edges",
    "propagate_coordination",
]
