"""Browsing contexts: one window-scoped event bus and storage view per tab."""

from __future__ import annotations

import logging
from types import TracebackType

from zervos.core.config import settings
from zervos.core.events import EventBus, EventName, StorageEvent
from zervos.storage.area import SqlStorageArea, StorageArea
from zervos.storage.local_store import LocalStore

logger = logging.getLogger(__name__)


class BrowsingContext:
    """A single tab of the dashboard.

    Storage mutations made by other contexts attached to the same area arrive
    on ``events`` as ``storage`` events; the context's own writes do not.
    """

    def __init__(self, area: StorageArea, *, origin: str | None = None, name: str = "tab"):
        self.name = name
        self.area = area
        self.origin = (origin or settings.APP_ORIGIN).rstrip("/")
        self.events = EventBus()
        self.storage = LocalStore(area, owner=self)
        self.location = "/"
        self.history: list[str] = []
        area.attach(self)

    def storage_changed(self, event: StorageEvent) -> None:
        self.events.publish(EventName.STORAGE, event)

    def navigate(self, path: str) -> None:
        """Client-side navigation; records the visited route."""
        self.history.append(path)
        self.location = path

    def close(self) -> None:
        self.area.detach(self)

    def __enter__(self) -> BrowsingContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"BrowsingContext(name={self.name!r}, origin={self.origin!r})"


_server_context: BrowsingContext | None = None


def get_context() -> BrowsingContext:
    """FastAPI dependency: the context the HTTP API operates on.

    Backed by the SQL storage area so state outlives the process.
    """
    global _server_context
    if _server_context is None:
        _server_context = BrowsingContext(SqlStorageArea(), name="api")
        logger.info("Created server browsing context for %s", _server_context.origin)
    return _server_context
