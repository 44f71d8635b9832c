"""Window-scoped publish/subscribe bus.

Each browsing context owns one ``EventBus``. Delivery is synchronous and
ordered by subscription; events are not buffered for late subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventName(str, Enum):
    NEW_NOTIFICATION = "new-notification"
    NOTIFICATIONS_UPDATED = "notifications-updated"
    LOCAL_STORAGE_CHANGED = "localStorageChanged"
    TEAM_MEMBERS_UPDATED = "team-members-updated"
    TIMESLOTS_UPDATED = "timeslots-updated"
    SALES_CALLS_UPDATED = "sales-calls-updated"
    INVOICE_CREATED = "invoice_created"
    # Cross-context storage signal, never delivered to the writing context
    STORAGE = "storage"


@dataclass(frozen=True)
class Event:
    name: str
    detail: Any = None


@dataclass(frozen=True)
class StorageEvent:
    """Payload of a ``storage`` event. ``key`` is None after a full clear."""

    key: str | None
    old_value: str | None
    new_value: str | None


Handler = Callable[[Event], Any]


def _event_key(name: EventName | str) -> str:
    return name.value if isinstance(name, EventName) else name


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, name: EventName | str, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` for ``name`` and return a function that removes it."""
        key = _event_key(name)
        self._handlers.setdefault(key, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(key, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, name: EventName | str, detail: Any = None) -> None:
        key = _event_key(name)
        event = Event(name=key, detail=detail)
        # Snapshot so handlers may (un)subscribe while being dispatched
        for handler in list(self._handlers.get(key, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %r for event '%s' failed", handler, key)

    def subscriber_count(self, name: EventName | str) -> int:
        return len(self._handlers.get(_event_key(name), []))
