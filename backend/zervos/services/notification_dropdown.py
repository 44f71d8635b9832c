"""Notification bell: unread badge, category filter and item actions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from zervos.core.context import BrowsingContext
from zervos.core.events import Event, EventName, StorageEvent
from zervos.repositories.notification_repository import NOTIFICATIONS_KEY
from zervos.schemas.notification import ALL_CATEGORIES, CategoryFilter, NotificationRecord
from zervos.services.notification_service import (
    NotificationService,
    parse_category_filter,
    sort_newest_first,
)

logger = logging.getLogger(__name__)


class NotificationDropdown:
    """Holds a read-only snapshot of the notification list.

    The snapshot is refreshed from ``notifications-updated`` payloads in the
    same tab and re-read from storage on ``storage`` events from other tabs.
    Opening the panel never reads storage.
    """

    def __init__(self, context: BrowsingContext, service: NotificationService | None = None):
        self.context = context
        self.service = service or NotificationService(context)
        self.is_open = False
        self.active_filter: CategoryFilter | str = ALL_CATEGORIES
        self._snapshot: list[NotificationRecord] = []
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    def mount(self) -> None:
        if self.mounted:
            return
        events = self.context.events
        self._unsubscribers = [
            events.subscribe(EventName.NOTIFICATIONS_UPDATED, self._on_updated),
            events.subscribe(EventName.STORAGE, self._on_storage),
        ]
        self._snapshot = self.service.initialize()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.is_open = False

    def _on_updated(self, event: Event) -> None:
        self._snapshot = list(event.detail or [])

    def _on_storage(self, event: Event) -> None:
        detail: StorageEvent = event.detail
        if detail.key is None or detail.key == NOTIFICATIONS_KEY:
            self._snapshot = self.service.repo.get_all()

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> bool:
        self.is_open = not self.is_open
        return self.is_open

    def set_filter(self, category: CategoryFilter | str) -> None:
        parse_category_filter(category)  # rejects unknown categories
        self.active_filter = category

    @property
    def items(self) -> list[NotificationRecord]:
        wanted = parse_category_filter(self.active_filter)
        records = self._snapshot
        if wanted is not None:
            records = [r for r in records if r.category == wanted]
        return sort_newest_first(records)

    @property
    def unread_count(self) -> int:
        return sum(1 for r in self._snapshot if not r.read)

    def click(self, notification_id: str) -> NotificationRecord | None:
        """Mark the item read, close the panel and follow its path."""
        record = next((r for r in self._snapshot if r.id == notification_id), None)
        self.service.mark_read(notification_id)
        self.close()
        if record is not None and record.path:
            self.context.navigate(record.path)
        return record

    def mark_all_read(self) -> int:
        return self.service.mark_all_read()

    def clear_all(self) -> None:
        self.service.clear_all()
