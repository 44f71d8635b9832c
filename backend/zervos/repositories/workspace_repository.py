"""Repository for workspaces, the selected-workspace pointer and company profiles."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from zervos.schemas.workspace import CompanyProfile, OrganizationProfile, Workspace
from zervos.storage.local_store import LocalStore

logger = logging.getLogger(__name__)

WORKSPACES_KEY = "workspaces"
SELECTED_WORKSPACE_KEY = "selectedWorkspaceId"
COMPANY_KEY = "zervos_company"
ORGANIZATION_KEY = "zervos_organization"


class WorkspaceRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self) -> list[Workspace]:
        workspaces = []
        for raw in self.store.read_list(WORKSPACES_KEY):
            try:
                workspaces.append(Workspace.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed workspace %r: %s", raw, e)
        return workspaces

    def save_all(self, workspaces: list[Workspace]) -> bool:
        return self.store.write(WORKSPACES_KEY, [w.to_storage() for w in workspaces])

    def get_selected_id(self) -> str | None:
        value = self.store.read(SELECTED_WORKSPACE_KEY)
        if value is None or value == "":
            return None
        # Timestamp ids written unquoted parse back as numbers
        return str(value)

    def set_selected_id(self, workspace_id: str | None) -> bool:
        if workspace_id is None:
            return self.store.remove(SELECTED_WORKSPACE_KEY)
        return self.store.write(SELECTED_WORKSPACE_KEY, workspace_id)

    def get_company(self) -> CompanyProfile | None:
        raw = self.store.read(COMPANY_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return CompanyProfile.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring malformed company profile: %s", e)
            return None

    def save_company(self, company: CompanyProfile) -> bool:
        return self.store.write(COMPANY_KEY, company.to_storage())

    def get_organization(self) -> OrganizationProfile | None:
        raw = self.store.read(ORGANIZATION_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return OrganizationProfile.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring malformed organization profile: %s", e)
            return None
