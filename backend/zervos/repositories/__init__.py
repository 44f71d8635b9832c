from zervos.repositories.invoice_repository import InvoiceRepository
from zervos.repositories.notification_repository import NotificationRepository
from zervos.repositories.team_member_repository import SalesCallRepository, TeamMemberRepository
from zervos.repositories.time_slot_repository import TimeSlotRepository
from zervos.repositories.workspace_repository import WorkspaceRepository

__all__ = [
    "InvoiceRepository",
    "NotificationRepository",
    "SalesCallRepository",
    "TeamMemberRepository",
    "TimeSlotRepository",
    "WorkspaceRepository",
]
