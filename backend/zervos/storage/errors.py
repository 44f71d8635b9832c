class StorageError(Exception):
    """Base error raised by storage areas."""


class StorageQuotaExceededError(StorageError):
    """The write would exceed the storage area's quota."""


class StorageUnavailableError(StorageError):
    """The storage area is disabled or its backend cannot be reached."""
