"""Pydantic schemas for workspaces and the profiles they are derived from."""

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from zervos.schemas.shared import CamelModel


class WorkspaceStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


DEFAULT_WORKSPACE_NAME = "My Workspace"
DEFAULT_WORKSPACE_INITIALS = "MW"


def workspace_initials(name: str) -> str:
    """Uppercased first two characters; the default workspace is always ``MW``."""
    if name == DEFAULT_WORKSPACE_NAME:
        return DEFAULT_WORKSPACE_INITIALS
    return name[:2].upper()


class Workspace(CamelModel):
    id: str
    name: str
    initials: str = ""
    color: str = "bg-purple-500"
    email: str = ""
    description: str = ""
    status: WorkspaceStatus = WorkspaceStatus.ACTIVE
    booking_link: str = ""
    prefix: str = "BK"
    max_digits: int = 4

    @model_validator(mode="after")
    def _initials_follow_name(self) -> "Workspace":
        self.initials = workspace_initials(self.name)
        return self

    def renamed(self, name: str, **changes: Any) -> "Workspace":
        """Copy with a new name; initials always follow the name."""
        return self.model_copy(
            update={**changes, "name": name, "initials": workspace_initials(name)}
        )

    def with_derived_initials(self) -> "Workspace":
        """Copy whose initials match the name again after an unvalidated update."""
        return self.model_copy(update={"initials": workspace_initials(self.name)})


class WorkspaceSelection(CamelModel):
    workspace_id: str | None = None


class CompanyProfile(CamelModel):
    """Company data written by onboarding (``zervos_company``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str | None = None
    industry: str | None = None
    email: str | None = None


class OrganizationProfile(CamelModel):
    """Organization settings (``zervos_organization``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    business_name: str | None = None
    email: str | None = None
    timezone: str = Field(default="UTC", max_length=50)
