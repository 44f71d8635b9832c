"""Active-workspace selection and the workspace collection.

``WorkspaceContext.initialize`` is idempotent: it synthesizes a default
workspace when none exist, keeps a lone workspace's name in step with the
company profile, and heals a selection that points at a missing workspace.
It reruns whenever the company profile changes in another tab or any code in
this tab announces ``localStorageChanged``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from zervos.core.context import BrowsingContext
from zervos.core.events import Event, EventName, StorageEvent
from zervos.repositories.workspace_repository import COMPANY_KEY, WorkspaceRepository
from zervos.schemas.workspace import (
    DEFAULT_WORKSPACE_NAME,
    CompanyProfile,
    Workspace,
    WorkspaceStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_DESCRIPTION = "Default workspace"
DEFAULT_WORKSPACE_COLOR = "bg-purple-500"
DEFAULT_BOOKING_PREFIX = "BK"
DEFAULT_MAX_DIGITS = 4


def utc_now() -> datetime:
    return datetime.now(UTC)


def derive_default_workspace(
    company: CompanyProfile | None,
    *,
    origin: str,
    now: datetime,
) -> Workspace:
    """Build the workspace synthesized when none exist.

    Every field falls back to a fixed default when the company profile is
    missing or lacks it.
    """
    name = company.name if company is not None and company.name else None
    email = company.email if company is not None and company.email else ""
    industry = company.industry if company is not None and company.industry else None
    return Workspace(
        id=str(int(now.timestamp() * 1000)),
        name=name or DEFAULT_WORKSPACE_NAME,
        color=DEFAULT_WORKSPACE_COLOR,
        email=email,
        description=industry or DEFAULT_WORKSPACE_DESCRIPTION,
        status=WorkspaceStatus.ACTIVE,
        booking_link=f"{origin.rstrip('/')}/book/default",
        prefix=DEFAULT_BOOKING_PREFIX,
        max_digits=DEFAULT_MAX_DIGITS,
    )


class WorkspaceContext:
    def __init__(self, context: BrowsingContext, clock: Callable[[], datetime] | None = None):
        self.context = context
        self.repo = WorkspaceRepository(context.storage)
        self._now = clock or utc_now
        self._workspaces: list[Workspace] = []
        self._selected: Workspace | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    def mount(self) -> Workspace | None:
        if not self.mounted:
            events = self.context.events
            self._unsubscribers = [
                events.subscribe(EventName.STORAGE, self._on_storage),
                events.subscribe(EventName.LOCAL_STORAGE_CHANGED, self._on_local_change),
            ]
        return self.initialize()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_storage(self, event: Event) -> None:
        detail: StorageEvent = event.detail
        if detail.key in (None, COMPANY_KEY):
            self.initialize()

    def _on_local_change(self, event: Event) -> None:
        self.initialize()

    def initialize(self) -> Workspace | None:
        company = self.repo.get_company()
        workspaces = self.repo.get_all()

        if not workspaces:
            default = derive_default_workspace(company, origin=self.context.origin, now=self._now())
            workspaces = [default]
            self.repo.save_all(workspaces)
            logger.info("Created default workspace '%s' (%s)", default.name, default.id)
        elif (
            len(workspaces) == 1
            and company is not None
            and company.name
            and workspaces[0].name != company.name
        ):
            current = workspaces[0]
            workspaces = [
                current.renamed(
                    company.name, description=company.industry or current.description
                )
            ]
            self.repo.save_all(workspaces)
            logger.info("Renamed workspace %s to '%s' to match company", current.id, company.name)

        self._workspaces = workspaces

        selected_id = self.repo.get_selected_id()
        selected = next((w for w in workspaces if w.id == selected_id), None)
        if selected is None and workspaces:
            selected = workspaces[0]
            self.repo.set_selected_id(selected.id)
        self._selected = selected
        return selected

    def get_selected(self) -> Workspace | None:
        return self._selected

    def set_selected(self, workspace: Workspace | None) -> None:
        """Select ``workspace`` (or nothing). It must belong to the collection."""
        if workspace is not None and all(w.id != workspace.id for w in self._workspaces):
            raise ValueError(f"Workspace {workspace.id} is not in the collection")
        self._selected = workspace
        self.repo.set_selected_id(workspace.id if workspace is not None else None)

    def get_all(self) -> list[Workspace]:
        return list(self._workspaces)

    def set_all(self, workspaces: list[Workspace]) -> None:
        """Replace the collection and reconcile the selection against it."""
        self._workspaces = [w.with_derived_initials() for w in workspaces]
        self.repo.save_all(self._workspaces)

        if self._selected is not None:
            updated = next((w for w in self._workspaces if w.id == self._selected.id), None)
            self._selected = updated
            if updated is None:
                self.repo.set_selected_id(None)

        self.context.events.publish(EventName.LOCAL_STORAGE_CHANGED)

    def get_by_id(self, workspace_id: str) -> Workspace | None:
        return next((w for w in self._workspaces if w.id == workspace_id), None)
