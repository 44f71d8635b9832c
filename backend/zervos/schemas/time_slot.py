from pydantic import Field

from zervos.schemas.shared import CamelModel


class TimeSlot(CamelModel):
    id: str
    day_of_week: str
    start_time: str
    end_time: str
    is_active: bool = True
    max_bookings: int = Field(default=1, ge=0)
    current_bookings: int = Field(default=0, ge=0)


class TimeSlotSummary(CamelModel):
    active_slots: int
    total_booked: int
    total_capacity: int
