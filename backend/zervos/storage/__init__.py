from zervos.storage.area import MemoryStorageArea, SqlStorageArea, StorageArea
from zervos.storage.errors import StorageError, StorageQuotaExceededError, StorageUnavailableError
from zervos.storage.local_store import LocalStore, scoped_key

__all__ = [
    "LocalStore",
    "MemoryStorageArea",
    "SqlStorageArea",
    "StorageArea",
    "StorageError",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
    "scoped_key",
]
