"""Tests for the notification bell dropdown."""

import pytest

from zervos.core.events import EventName
from zervos.services.notification_dropdown import NotificationDropdown
from zervos.services.notification_service import NotificationService


@pytest.fixture
def dropdown(tab, clock):
    view = NotificationDropdown(tab, NotificationService(tab, clock=clock))
    view.mount()
    yield view
    view.unmount()


class TestMount:
    def test_mount_seeds_and_loads(self, dropdown) -> None:
        assert [r.id for r in dropdown.items] == ["n1", "n2", "n3"]
        assert dropdown.unread_count == 3

    def test_mount_is_idempotent(self, dropdown, tab) -> None:
        dropdown.mount()
        assert tab.events.subscriber_count(EventName.NOTIFICATIONS_UPDATED) == 1

    def test_unmount_releases_subscriptions(self, dropdown, tab) -> None:
        dropdown.unmount()
        assert tab.events.subscriber_count(EventName.NOTIFICATIONS_UPDATED) == 0
        assert tab.events.subscriber_count(EventName.STORAGE) == 0


class TestPanel:
    def test_toggle(self, dropdown) -> None:
        assert dropdown.toggle() is True
        assert dropdown.is_open is True
        assert dropdown.toggle() is False

    def test_filter_applies_to_items(self, dropdown) -> None:
        dropdown.set_filter("invoices")
        assert [r.id for r in dropdown.items] == ["n2"]
        dropdown.set_filter("all")
        assert len(dropdown.items) == 3

    def test_unknown_filter_keeps_current(self, dropdown) -> None:
        dropdown.set_filter("pos")
        with pytest.raises(ValueError):
            dropdown.set_filter("marketing")
        assert dropdown.active_filter == "pos"

    def test_unread_count_ignores_filter(self, dropdown) -> None:
        dropdown.set_filter("pos")
        assert dropdown.unread_count == 3


class TestUpdates:
    def test_same_tab_update_refreshes_snapshot(self, dropdown, tab) -> None:
        NotificationService(tab).add_notification(title="Fresh")
        assert dropdown.items[0].title == "Fresh"
        assert dropdown.unread_count == 4

    def test_other_tab_write_refreshes_snapshot(self, dropdown, other_tab) -> None:
        NotificationService(other_tab).mark_all_read()
        assert dropdown.unread_count == 0

    def test_unrelated_storage_key_ignored(self, dropdown, tab, other_tab) -> None:
        # Bypass events in tab A so only a re-read would reveal the change
        tab.area.set_item("zervos_notifications_v1", "[]", source=tab)
        other_tab.storage.write("unrelated", 1)
        assert len(dropdown.items) == 3

    def test_other_tab_clear_refreshes_snapshot(self, dropdown, other_tab) -> None:
        other_tab.storage.clear()
        assert dropdown.items == []


class TestActions:
    def test_click_marks_read_closes_and_navigates(self, dropdown, tab) -> None:
        dropdown.open()
        record = dropdown.click("n2")
        assert record is not None
        assert dropdown.is_open is False
        assert tab.location == "/dashboard/invoices"
        assert next(r for r in dropdown.items if r.id == "n2").read is True

    def test_click_without_path_does_not_navigate(self, dropdown, tab) -> None:
        record = NotificationService(tab).add_notification(title="No link")
        dropdown.click(record.id)
        assert tab.history == []

    def test_click_unknown_id(self, dropdown, tab) -> None:
        dropdown.open()
        assert dropdown.click("missing") is None
        assert dropdown.is_open is False
        assert tab.history == []

    def test_mark_all_read(self, dropdown) -> None:
        assert dropdown.mark_all_read() == 3
        assert dropdown.unread_count == 0

    def test_clear_all(self, dropdown) -> None:
        dropdown.clear_all()
        assert dropdown.items == []
