from zervos.models.storage_entry import StorageEntry

__all__ = ["StorageEntry"]
