"""Tests for the popup poller: triggers, de-duplication, queueing and expiry."""

import asyncio
from unittest.mock import Mock

import pytest

from zervos.core.events import EventName
from zervos.services.notification_popup import NotificationPopupPoller
from zervos.services.notification_service import NotificationService


@pytest.fixture
def sound():
    return Mock()


@pytest.fixture
def poller(tab, sound, monotonic):
    NotificationService(tab).initialize()
    popups = NotificationPopupPoller(
        tab,
        sound=sound,
        clock=monotonic,
        poll_interval=0.01,
        dismiss_after=5.0,
        max_visible=5,
    )
    popups.mount()
    yield popups
    popups.unmount()


def _add_many(ctx, count: int) -> list:
    service = NotificationService(ctx)
    return [service.add_notification(title=f"Booking {i}", category="bookings") for i in range(count)]


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


class TestTriggers:
    def test_existing_history_is_not_new(self, poller, sound) -> None:
        assert poller.check() == 0
        assert poller.visible == []
        sound.play.assert_not_called()

    def test_same_tab_event_pops_up(self, poller, tab, sound) -> None:
        (record,) = _add_many(tab, 1)
        assert [p.id for p in poller.visible] == [record.id]
        assert poller.visible[0].popup_id.startswith("popup-")
        sound.play.assert_called_once()

    def test_poll_after_event_does_not_duplicate(self, poller, tab, sound) -> None:
        _add_many(tab, 1)
        assert poller.check() == 0
        assert len(poller.visible) == 1
        sound.play.assert_called_once()

    def test_other_tab_append_found_by_poll(self, poller, other_tab, sound) -> None:
        (record,) = _add_many(other_tab, 1)
        assert poller.visible == []
        assert poller.check() == 1
        assert [p.id for p in poller.visible] == [record.id]
        sound.play.assert_called_once()

    def test_one_sound_per_poll_batch(self, poller, other_tab, sound) -> None:
        _add_many(other_tab, 3)
        assert poller.check() == 3
        sound.play.assert_called_once()

    def test_repeated_event_for_same_id_is_ignored(self, poller, tab, sound) -> None:
        (record,) = _add_many(tab, 1)
        tab.events.publish(EventName.NEW_NOTIFICATION, record)
        assert len(poller.visible) == 1
        sound.play.assert_called_once()

    def test_dict_payload_is_accepted(self, poller, tab) -> None:
        tab.events.publish(
            EventName.NEW_NOTIFICATION,
            {"id": "ext-1", "title": "External", "category": "pos", "date": "2025-11-07T10:00:00Z"},
        )
        assert [p.id for p in poller.visible] == ["ext-1"]

    def test_shrinking_list_resets_baseline(self, poller, tab, other_tab) -> None:
        NotificationService(other_tab).clear_all()
        assert poller.check() == 0
        _add_many(other_tab, 1)
        assert poller.check() == 1

    def test_seen_ids_are_bounded(self, tab, sound, monotonic) -> None:
        popups = NotificationPopupPoller(tab, sound=sound, clock=monotonic, seen_ids=1)
        popups.mount()
        first, second = _add_many(tab, 2)
        popups.dismiss(popups.visible[0].popup_id)
        # first has been evicted from the seen-set by second
        tab.events.publish(EventName.NEW_NOTIFICATION, first)
        assert [p.id for p in popups.visible] == [second.id, first.id]
        popups.unmount()


# ---------------------------------------------------------------------------
# Queue bound and expiry
# ---------------------------------------------------------------------------


class TestQueue:
    def test_at_most_five_visible_rest_pending(self, poller, other_tab) -> None:
        _add_many(other_tab, 7)
        poller.check()
        assert len(poller.visible) == 5
        assert len(poller.pending) == 2

    def test_pending_shown_after_expiry(self, poller, other_tab, monotonic) -> None:
        records = _add_many(other_tab, 7)
        poller.check()
        pending_ids = [p.id for p in poller.pending]

        monotonic.advance(5.0)
        expired = poller.expire_due()

        assert len(expired) == 5
        assert [p.id for p in poller.visible] == pending_ids
        assert poller.pending == []
        assert {p.id for p in expired} | set(pending_ids) == {r.id for r in records}

    def test_not_expired_before_timeout(self, poller, tab, monotonic) -> None:
        _add_many(tab, 1)
        monotonic.advance(4.9)
        assert poller.expire_due() == []
        assert len(poller.visible) == 1
        assert poller.next_expiry_in() == pytest.approx(0.1)

    def test_promoted_popup_gets_full_display_time(self, poller, other_tab, monotonic) -> None:
        _add_many(other_tab, 6)
        poller.check()
        monotonic.advance(3.0)
        poller.dismiss(poller.visible[0].popup_id)
        promoted = poller.visible[-1]

        monotonic.advance(2.0)
        poller.expire_due()
        assert [p.popup_id for p in poller.visible] == [promoted.popup_id]

        monotonic.advance(3.0)
        assert poller.expire_due() == [promoted]

    def test_dismiss(self, poller, tab) -> None:
        _add_many(tab, 2)
        first = poller.visible[0]
        assert poller.dismiss(first.popup_id) is True
        assert first not in poller.visible
        assert poller.dismiss(first.popup_id) is False

    def test_no_expiry_when_empty(self, poller) -> None:
        assert poller.next_expiry_in() is None


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_unmount_stops_listening(self, poller, tab, sound) -> None:
        poller.unmount()
        _add_many(tab, 1)
        assert poller.check() == 0
        assert poller.visible == []
        sound.play.assert_not_called()
        assert tab.events.subscriber_count(EventName.NEW_NOTIFICATION) == 0

    def test_remount_takes_new_baseline(self, poller, other_tab) -> None:
        poller.unmount()
        _add_many(other_tab, 2)
        poller.mount()
        assert poller.check() == 0

    @pytest.mark.asyncio
    async def test_run_loop_polls_until_stopped(self, poller, other_tab) -> None:
        task = poller.start()
        _add_many(other_tab, 1)
        for _ in range(50):
            if poller.visible:
                break
            await asyncio.sleep(0.01)
        assert len(poller.visible) == 1

        poller.stop()
        with pytest.raises(asyncio.CancelledError):
            await task
