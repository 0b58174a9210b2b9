from .store import NodeStore, StoreTransaction

__all__ = ["NodeStore", "StoreTransaction"]
