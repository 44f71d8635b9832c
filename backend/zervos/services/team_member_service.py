"""Workspace-scoped team members.

Members are persisted under ``zervos_team_members::<workspaceId>`` and mirrored
into the global ``zervos_team_members`` list. Without a workspace there is no
key to write to, so mutations are skipped.
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from zervos.core.context import BrowsingContext
from zervos.core.events import EventName
from zervos.repositories.team_member_repository import SalesCallRepository, TeamMemberRepository
from zervos.schemas.team import TeamMember

logger = logging.getLogger(__name__)

_EMAIL_SPLIT = re.compile(r"[\s,]+")


def name_from_email(email: str) -> str:
    """``jane.doe@x.com`` -> ``Jane Doe``."""
    local = email.split("@", 1)[0]
    spaced = re.sub(r"[._]", " ", local)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def _same_member(a: TeamMember, b: TeamMember) -> bool:
    if a.id == b.id:
        return True
    return bool(a.email) and a.email.lower() == b.email.lower()


class TeamMemberService:
    def __init__(
        self,
        context: BrowsingContext,
        workspace_id: str | None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.context = context
        self.workspace_id = workspace_id
        self.repo = TeamMemberRepository(context.storage)
        self.calls_repo = SalesCallRepository(context.storage)
        self._now = clock or (lambda: datetime.now(UTC))

    def list_members(self) -> list[TeamMember]:
        if not self.workspace_id:
            return []
        return self.repo.get_all(self.workspace_id)

    def invite(self, emails: str, role: str = "Staff") -> list[TeamMember]:
        """Add one member per address in a comma/whitespace separated list."""
        addresses = [e.strip() for e in _EMAIL_SPLIT.split(emails) if e.strip()]
        stamp = int(self._now().timestamp() * 1000)
        invited = [
            TeamMember(
                id=f"{stamp}-{secrets.token_hex(4)}",
                name=name_from_email(address),
                role=role,
                email=address,
            )
            for address in addresses
        ]
        if invited:
            self._persist([*self.list_members(), *invited])
        return invited

    def update(self, member: TeamMember) -> TeamMember | None:
        members = self.list_members()
        for index, current in enumerate(members):
            if current.id == member.id:
                members[index] = member
                self._persist(members)
                return member
        return None

    def remove(self, member_id: str) -> bool:
        """Remove a member and unassign them from this workspace's sessions."""
        members = self.list_members()
        member = next((m for m in members if m.id == member_id), None)
        if member is None:
            return False
        self._persist([m for m in members if m.id != member_id], removed=member)
        self._unassign(member)
        return True

    def _persist(self, members: list[TeamMember], removed: TeamMember | None = None) -> bool:
        if not self.workspace_id:
            logger.debug("No workspace selected, team members not saved")
            return False
        saved = self.repo.save_all(members, self.workspace_id)
        self._mirror_global(members, removed)
        self.context.events.publish(EventName.TEAM_MEMBERS_UPDATED)
        return saved

    def _mirror_global(self, members: list[TeamMember], removed: TeamMember | None) -> None:
        merged = self.repo.get_all()
        if removed is not None:
            merged = [m for m in merged if not _same_member(m, removed)]
        for member in members:
            index = next((i for i, m in enumerate(merged) if _same_member(m, member)), None)
            if index is None:
                merged.append(member)
            else:
                merged[index] = member
        self.repo.save_all(merged)

    def _unassign(self, member: TeamMember) -> None:
        if not self.workspace_id:
            return
        calls = self.calls_repo.get_all(self.workspace_id)
        if not calls:
            return
        gone = {member.id, member.email}
        cleaned = [
            call.model_copy(
                update={
                    "assigned_salespersons": [
                        sp for sp in call.assigned_salespersons if sp not in gone
                    ]
                }
            )
            for call in calls
        ]
        self.calls_repo.save_all(self.workspace_id, cleaned)
        self.context.events.publish(
            EventName.SALES_CALLS_UPDATED, {"workspaceId": self.workspace_id}
        )
