from __future__ import annotations

import logging

from pydantic import ValidationError

from zervos.schemas.time_slot import TimeSlot
from zervos.storage.local_store import LocalStore

logger = logging.getLogger(__name__)

TIME_SLOTS_KEY = "zervos_timeslots"


class TimeSlotRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self) -> list[TimeSlot]:
        slots = []
        for raw in self.store.read_list(TIME_SLOTS_KEY):
            try:
                slots.append(TimeSlot.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed time slot %r: %s", raw, e)
        return slots

    def save_all(self, slots: list[TimeSlot]) -> bool:
        return self.store.write(TIME_SLOTS_KEY, [s.to_storage() for s in slots])
