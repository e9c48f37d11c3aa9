from .base import ImportStore, StoredRecord, StoreError
from .memory import MemoryStore

__all__ = [
    "ImportStore",
    "MemoryStore",
    "StoredRecord",
    "StoreError",
]
