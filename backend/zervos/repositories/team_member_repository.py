"""Repositories for workspace-scoped team members and their session/call assignments."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from zervos.schemas.team import SalesCall, TeamMember
from zervos.storage.local_store import LocalStore, scoped_key

logger = logging.getLogger(__name__)

TEAM_MEMBERS_KEY = "zervos_team_members"
SALES_CALLS_KEY = "zervos_sales_calls"


class TeamMemberRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self, workspace_id: str | None = None) -> list[TeamMember]:
        """Members of ``workspace_id``, or the global list when it is None."""
        members = []
        for raw in self.store.read_list(scoped_key(TEAM_MEMBERS_KEY, workspace_id)):
            try:
                members.append(TeamMember.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed team member %r: %s", raw, e)
        return members

    def save_all(self, members: list[TeamMember], workspace_id: str | None = None) -> bool:
        return self.store.write(
            scoped_key(TEAM_MEMBERS_KEY, workspace_id), [m.to_storage() for m in members]
        )


class SalesCallRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self, workspace_id: str) -> list[SalesCall]:
        calls = []
        for raw in self.store.read_list(scoped_key(SALES_CALLS_KEY, workspace_id)):
            try:
                calls.append(SalesCall.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed sales call %r: %s", raw, e)
        return calls

    def save_all(self, workspace_id: str, calls: list[SalesCall]) -> bool:
        return self.store.write(
            scoped_key(SALES_CALLS_KEY, workspace_id), [c.to_storage() for c in calls]
        )
