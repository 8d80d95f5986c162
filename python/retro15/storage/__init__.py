from retro15.storage.kvstore import JsonFileStore, KeyValueStore, MemoryStore, StorageError
from retro15.storage.session_store import SessionStore, StorageStatus, parse_snapshot

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SessionStore",
    "StorageError",
    "StorageStatus",
    "parse_snapshot",
]
