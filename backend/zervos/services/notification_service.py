"""Service owning the persisted notification list.

Every mutation writes the full list back to storage and publishes
``notifications-updated`` with the resulting list. A failed write is logged by
the storage facade and the event is still published, so mounted views keep
working from the in-memory result.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from zervos.core.context import BrowsingContext
from zervos.core.events import EventName
from zervos.repositories.notification_repository import NotificationRepository
from zervos.schemas.notification import (
    ALL_CATEGORIES,
    CategoryFilter,
    NotificationCategory,
    NotificationCreate,
    NotificationRecord,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_notification_id(now: datetime) -> str:
    """``n-<epoch ms>-<9 random base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"n-{int(now.timestamp() * 1000)}-{suffix}"


def sort_newest_first(records: list[NotificationRecord]) -> list[NotificationRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)


def sample_notifications(now: datetime) -> list[NotificationRecord]:
    """Demo records written the first time the list is found empty."""
    return [
        NotificationRecord(
            id="n1",
            title="New booking: Beard Design",
            body="Vaishak booked Beard Design at 10:00 AM",
            category=NotificationCategory.BOOKINGS,
            path="/dashboard/appointments",
            date=now - timedelta(hours=1),
        ),
        NotificationRecord(
            id="n2",
            title="Invoice paid",
            body="Invoice INV-20251106-001 was paid",
            category=NotificationCategory.INVOICES,
            path="/dashboard/invoices",
            date=now - timedelta(hours=5),
        ),
        NotificationRecord(
            id="n3",
            title="In-person sale recorded",
            body="POS sale POS-20251107-001 recorded",
            category=NotificationCategory.POS,
            path="/dashboard/pos",
            date=now - timedelta(hours=24),
        ),
    ]


def parse_category_filter(value: CategoryFilter | str) -> NotificationCategory | None:
    if value == ALL_CATEGORIES:
        return None
    return NotificationCategory(value)


class NotificationService:
    """Add, read-mark, clear and filter notifications for one browsing context."""

    def __init__(
        self,
        context: BrowsingContext,
        clock: Callable[[], datetime] | None = None,
    ):
        self.context = context
        self.repo = NotificationRepository(context.storage)
        self._now = clock or utc_now

    def initialize(self) -> list[NotificationRecord]:
        """Load the list, seeding demo records the first time it is empty.

        The seed marker makes seeding happen at most once per storage area;
        a list emptied by ``clear_all`` stays empty.
        """
        records = self.repo.get_all()
        if records or self.repo.is_seeded():
            if records and not self.repo.is_seeded():
                self.repo.mark_seeded()
            return records

        records = sample_notifications(self._now())
        self.repo.mark_seeded()
        self._commit(records)
        logger.info("Seeded %d demo notifications", len(records))
        return records

    def add_notification(
        self,
        *,
        title: str,
        category: NotificationCategory | str = NotificationCategory.SYSTEM,
        body: str | None = None,
        path: str | None = None,
    ) -> NotificationRecord:
        """Create an unread notification, prepend it and announce it."""
        data = NotificationCreate(title=title, category=category, body=body, path=path)  # type: ignore[arg-type]
        now = self._now()
        record = NotificationRecord(
            id=generate_notification_id(now),
            title=data.title,
            body=data.body,
            category=data.category,
            path=data.path,
            date=now,
            read=False,
        )
        self._commit([record, *self.repo.get_all()])
        self.context.events.publish(EventName.NEW_NOTIFICATION, record)
        return record

    def mark_read(self, notification_id: str) -> NotificationRecord | None:
        """Mark one notification read. Unknown ids are ignored."""
        records = self.repo.get_all()
        for index, record in enumerate(records):
            if record.id != notification_id:
                continue
            if record.read:
                return record
            updated = record.model_copy(update={"read": True})
            records[index] = updated
            self._commit(records)
            return updated
        return None

    def mark_all_read(self) -> int:
        """Mark every notification read; returns how many were unread."""
        records = self.repo.get_all()
        unread = sum(1 for r in records if not r.read)
        self._commit([r.model_copy(update={"read": True}) for r in records])
        return unread

    def clear_all(self) -> None:
        self._commit([])

    def filter(self, category: CategoryFilter | str = ALL_CATEGORIES) -> list[NotificationRecord]:
        """Records of ``category`` (or all), newest first. Does not write."""
        wanted = parse_category_filter(category)
        records = self.repo.get_all()
        if wanted is not None:
            records = [r for r in records if r.category == wanted]
        return sort_newest_first(records)

    def list_all(self) -> list[NotificationRecord]:
        return self.filter(ALL_CATEGORIES)

    def unread_count(self) -> int:
        return sum(1 for r in self.repo.get_all() if not r.read)

    def _commit(self, records: list[NotificationRecord]) -> None:
        self.repo.save_all(records)
        self.context.events.publish(EventName.NOTIFICATIONS_UPDATED, list(records))
