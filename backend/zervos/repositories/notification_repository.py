"""Repository for the persisted notification list."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from zervos.schemas.notification import NotificationRecord
from zervos.storage.local_store import LocalStore

logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "zervos_notifications_v1"
SEEDED_MARKER_KEY = "zervos_notifications_seeded_v1"


class NotificationRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self) -> list[NotificationRecord]:
        """Stored records in storage order (newest first); invalid entries are skipped."""
        records = []
        for raw in self.store.read_list(NOTIFICATIONS_KEY):
            try:
                records.append(NotificationRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed notification %r: %s", raw, e)
        return records

    def count(self) -> int:
        return len(self.store.read_list(NOTIFICATIONS_KEY))

    def save_all(self, records: list[NotificationRecord]) -> bool:
        return self.store.write(NOTIFICATIONS_KEY, [r.to_storage() for r in records])

    def is_seeded(self) -> bool:
        return bool(self.store.read(SEEDED_MARKER_KEY, False))

    def mark_seeded(self) -> bool:
        return self.store.write(SEEDED_MARKER_KEY, True)
