"""Per-origin string storage shared by every browsing context.

A storage area mirrors the browser's ``localStorage``: synchronous string
values keyed by string. After each successful mutation the area notifies
every attached listener except the one that performed the write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zervos.core import database as db_module
from zervos.core.events import StorageEvent
from zervos.models.storage_entry import StorageEntry
from zervos.storage.errors import StorageQuotaExceededError, StorageUnavailableError


class StorageListener(Protocol):
    def storage_changed(self, event: StorageEvent) -> None: ...


class StorageArea(ABC):
    """Base class; subclasses implement the ``_raw_*`` primitives."""

    def __init__(self) -> None:
        self._listeners: list[StorageListener] = []

    def attach(self, listener: StorageListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def detach(self, listener: StorageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_item(self, key: str) -> str | None:
        return self._raw_get(key)

    def set_item(self, key: str, value: str, *, source: Any = None) -> None:
        old_value = self._raw_get(key)
        self._raw_set(key, value)
        self._broadcast(StorageEvent(key=key, old_value=old_value, new_value=value), source)

    def remove_item(self, key: str, *, source: Any = None) -> None:
        old_value = self._raw_get(key)
        if old_value is None:
            return
        self._raw_delete(key)
        self._broadcast(StorageEvent(key=key, old_value=old_value, new_value=None), source)

    def clear(self, *, source: Any = None) -> None:
        self._raw_clear()
        self._broadcast(StorageEvent(key=None, old_value=None, new_value=None), source)

    def keys(self) -> list[str]:
        return self._raw_keys()

    def _broadcast(self, event: StorageEvent, source: Any) -> None:
        for listener in list(self._listeners):
            if listener is source:
                continue
            listener.storage_changed(event)

    @abstractmethod
    def _raw_get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        pass  # pragma: no cover

    @abstractmethod
    def _raw_set(self, key: str, value: str) -> None:
        """Store the value, raising a StorageError subclass on failure."""
        pass  # pragma: no cover

    @abstractmethod
    def _raw_delete(self, key: str) -> None:
        """Delete the key if present."""
        pass  # pragma: no cover

    @abstractmethod
    def _raw_clear(self) -> None:
        """Delete every key."""
        pass  # pragma: no cover

    @abstractmethod
    def _raw_keys(self) -> list[str]:
        """Return all stored keys."""
        pass  # pragma: no cover


class MemoryStorageArea(StorageArea):
    """In-process storage area.

    ``quota_bytes`` bounds the summed length of keys and values, the way a
    browser bounds an origin's storage. ``available=False`` makes every access
    fail as if storage were disabled.
    """

    def __init__(self, quota_bytes: int | None = None, available: bool = True) -> None:
        super().__init__()
        self._items: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.available = available

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Storage is disabled")

    def _usage(self, excluding: str | None = None) -> int:
        return sum(len(k) + len(v) for k, v in self._items.items() if k != excluding)

    def _raw_get(self, key: str) -> str | None:
        self._check_available()
        return self._items.get(key)

    def _raw_set(self, key: str, value: str) -> None:
        self._check_available()
        if self.quota_bytes is not None:
            needed = self._usage(excluding=key) + len(key) + len(value)
            if needed > self.quota_bytes:
                raise StorageQuotaExceededError(
                    f"Setting '{key}' needs {needed} bytes, quota is {self.quota_bytes}"
                )
        self._items[key] = value

    def _raw_delete(self, key: str) -> None:
        self._check_available()
        self._items.pop(key, None)

    def _raw_clear(self) -> None:
        self._check_available()
        self._items.clear()

    def _raw_keys(self) -> list[str]:
        self._check_available()
        return list(self._items)


class SqlStorageArea(StorageArea):
    """Storage area persisted in the ``storage_entries`` table."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        super().__init__()
        self._session_factory = session_factory

    def _run(self, operation: Callable[[Session], Any]) -> Any:
        try:
            with db_module.session_scope(self._session_factory) as db:
                return operation(db)
        except SQLAlchemyError as e:
            raise StorageUnavailableError(str(e)) from e

    def _raw_get(self, key: str) -> str | None:
        def op(db: Session) -> str | None:
            entry = db.query(StorageEntry).filter(StorageEntry.key == key).first()
            return None if entry is None else str(entry.value)

        return self._run(op)  # type: ignore[no-any-return]

    def _raw_set(self, key: str, value: str) -> None:
        def op(db: Session) -> None:
            entry = db.query(StorageEntry).filter(StorageEntry.key == key).first()
            if entry is None:
                db.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value  # type: ignore[assignment]

        self._run(op)

    def _raw_delete(self, key: str) -> None:
        self._run(lambda db: db.query(StorageEntry).filter(StorageEntry.key == key).delete())

    def _raw_clear(self) -> None:
        self._run(lambda db: db.query(StorageEntry).delete())

    def _raw_keys(self) -> list[str]:
        def op(db: Session) -> list[str]:
            return [str(row.key) for row in db.query(StorageEntry.key).order_by(StorageEntry.key)]

        return self._run(op)  # type: ignore[no-any-return]
