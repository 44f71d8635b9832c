"""Transient popups for newly added notifications.

Two triggers feed the popup queue:

- the ``new-notification`` event, fired in the tab that added the record;
- a poll of the persisted list length, which also catches records added by
  other tabs.

Both can observe the same append, so each underlying notification id is
remembered in a bounded seen-set and popped up at most once while it stays in
that set. The queue is FIFO: the oldest ``max_visible`` popups are shown, the
rest wait for a free slot and are never dropped.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from zervos.core.config import settings
from zervos.core.context import BrowsingContext
from zervos.core.events import Event, EventName
from zervos.repositories.notification_repository import NotificationRepository
from zervos.schemas.notification import NotificationRecord, PopupNotification
from zervos.services.notification_sound import NotificationSound

logger = logging.getLogger(__name__)


def generate_popup_id() -> str:
    return f"popup-{uuid.uuid4().hex}"


@dataclass
class _QueuedPopup:
    popup: PopupNotification
    shown_at: float | None = None


class NotificationPopupPoller:
    def __init__(
        self,
        context: BrowsingContext,
        *,
        sound: NotificationSound | None = None,
        clock: Callable[[], float] = time.monotonic,
        poll_interval: float | None = None,
        dismiss_after: float | None = None,
        max_visible: int | None = None,
        seen_ids: int | None = None,
    ):
        self.context = context
        self.repo = NotificationRepository(context.storage)
        self.sound = sound or NotificationSound()
        self.clock = clock
        self.poll_interval = poll_interval or settings.POPUP_POLL_INTERVAL_SECONDS
        self.dismiss_after = dismiss_after or settings.POPUP_DISMISS_SECONDS
        self.max_visible = max_visible or settings.POPUP_MAX_VISIBLE
        self._seen: deque[str] = deque(maxlen=seen_ids or settings.POPUP_SEEN_IDS)
        self._queue: list[_QueuedPopup] = []
        self._last_count: int | None = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._task: asyncio.Task[None] | None = None

    # Lifecycle

    @property
    def mounted(self) -> bool:
        return self._last_count is not None

    def mount(self) -> None:
        """Start observing. Existing history is not treated as new."""
        if self.mounted:
            return
        self._last_count = self.repo.count()
        self._unsubscribers = [
            self.context.events.subscribe(EventName.NEW_NOTIFICATION, self._on_new_notification),
        ]

    def unmount(self) -> None:
        self.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._last_count = None
        self._queue = []

    def start(self) -> asyncio.Task[None]:
        """Mount if needed and run the poll loop on the running event loop."""
        self.mount()
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def run(self) -> None:
        while self.mounted:
            self.check()
            self.expire_due()
            await asyncio.sleep(self._next_wakeup())

    def _next_wakeup(self) -> float:
        remaining = self.next_expiry_in()
        if remaining is None:
            return self.poll_interval
        return max(0.0, min(self.poll_interval, remaining))

    # Triggers

    def _on_new_notification(self, event: Event) -> None:
        record = event.detail
        if not isinstance(record, NotificationRecord):
            record = NotificationRecord.model_validate(record)
        if self._last_count is not None:
            self._last_count += 1
        if self._enqueue([record]):
            self.sound.play()

    def check(self) -> int:
        """Poll the persisted list; enqueue whatever grew since the last check."""
        if self._last_count is None:
            return 0
        current = self.repo.count()
        added = 0
        if current > self._last_count:
            newest = self.repo.get_all()[: current - self._last_count]
            added = self._enqueue(newest)
            if added:
                self.sound.play()
        self._last_count = current
        return added

    def _enqueue(self, records: list[NotificationRecord]) -> int:
        added = 0
        for record in records:
            if record.id in self._seen:
                logger.debug("Notification %s already popped up, skipping", record.id)
                continue
            self._seen.append(record.id)
            popup = PopupNotification(**record.model_dump(), popup_id=generate_popup_id())
            self._queue.append(_QueuedPopup(popup=popup))
            added += 1
        if added:
            self._show_free_slots()
        return added

    # Queue

    def _show_free_slots(self) -> None:
        now = self.clock()
        for entry in self._queue[: self.max_visible]:
            if entry.shown_at is None:
                entry.shown_at = now

    @property
    def visible(self) -> list[PopupNotification]:
        return [entry.popup for entry in self._queue[: self.max_visible]]

    @property
    def pending(self) -> list[PopupNotification]:
        return [entry.popup for entry in self._queue[self.max_visible :]]

    def dismiss(self, popup_id: str) -> bool:
        """Close a popup now, whatever its timer says."""
        for index, entry in enumerate(self._queue):
            if entry.popup.popup_id == popup_id:
                del self._queue[index]
                self._show_free_slots()
                return True
        return False

    def expire_due(self) -> list[PopupNotification]:
        """Remove visible popups whose display time has elapsed."""
        now = self.clock()
        expired = [
            entry
            for entry in self._queue[: self.max_visible]
            if entry.shown_at is not None and now - entry.shown_at >= self.dismiss_after
        ]
        if not expired:
            return []
        expired_ids = {entry.popup.popup_id for entry in expired}
        self._queue = [entry for entry in self._queue if entry.popup.popup_id not in expired_ids]
        self._show_free_slots()
        return [entry.popup for entry in expired]

    def next_expiry_in(self) -> float | None:
        now = self.clock()
        deadlines = [
            entry.shown_at + self.dismiss_after - now
            for entry in self._queue[: self.max_visible]
            if entry.shown_at is not None
        ]
        return min(deadlines) if deadlines else None
