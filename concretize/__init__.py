"""Deterministic phrase analysis, entity linking and concept deduplication."""

__version__ = "0.1.0"
