from .schema import BACKENDS, METRICS_KEY, PROFILE_KEY, SESSION_ID_KEY, StorageError, StorageKeys
from .store import KeyValueStore, LocalStorage, MemoryStorage, open_storage

__all__ = [
    "BACKENDS",
    "METRICS_KEY",
    "PROFILE_KEY",
    "SESSION_ID_KEY",
    "StorageError",
    "StorageKeys",
    "KeyValueStore",
    "LocalStorage",
    "MemoryStorage",
    "open_storage",
]
