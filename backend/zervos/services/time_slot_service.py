from __future__ import annotations

from zervos.core.context import BrowsingContext
from zervos.core.events import EventName
from zervos.repositories.time_slot_repository import TimeSlotRepository
from zervos.schemas.time_slot import TimeSlot, TimeSlotSummary


class TimeSlotService:
    def __init__(self, context: BrowsingContext):
        self.context = context
        self.repo = TimeSlotRepository(context.storage)

    def list_slots(self) -> list[TimeSlot]:
        return self.repo.get_all()

    def save(self, slots: list[TimeSlot]) -> bool:
        saved = self.repo.save_all(slots)
        self.context.events.publish(EventName.TIMESLOTS_UPDATED)
        return saved

    def set_active(self, slot_id: str, is_active: bool) -> TimeSlot | None:
        slots = self.repo.get_all()
        for index, slot in enumerate(slots):
            if slot.id == slot_id:
                slots[index] = slot.model_copy(update={"is_active": is_active})
                self.save(slots)
                return slots[index]
        return None

    def summary(self) -> TimeSlotSummary:
        slots = self.repo.get_all()
        return TimeSlotSummary(
            active_slots=sum(1 for s in slots if s.is_active),
            total_booked=sum(s.current_bookings for s in slots),
            total_capacity=sum(s.max_bookings for s in slots),
        )
