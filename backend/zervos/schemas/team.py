from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from zervos.schemas.shared import CamelModel


class TeamMember(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    name: str
    role: str = "Staff"
    email: str = ""
    phone: str = ""
    appointments_count: int = 0
    availability: str = "Mon-Fri, 9 AM - 5 PM"


class SalesCall(CamelModel):
    """Session/call record; only the assignment list is interpreted here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    assigned_salespersons: list[str] = Field(default_factory=list)
