"""Exceptions shared across the concretize pipeline."""

from __future__ import annotations


class ExternalLookupError(RuntimeError):
    """Raised when a knowledge-base search or fetch fails or returns junk."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


class PersistenceError(RuntimeError):
    """Raised when a concept reconciliation transaction could not be applied.

    The store is left as it was before the transaction started; callers
    should treat the concept index as stale until a later run succeeds.
    """

    def __init__(self, operation: str, reason: str):
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


__all__ = ["ExternalLookupError", "PersistenceError"]
