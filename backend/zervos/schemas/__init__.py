from zervos.schemas.invoice import (
    Invoice,
    InvoiceCompany,
    InvoiceCreate,
    InvoiceCustomer,
    InvoiceEmailLog,
    InvoiceServiceLine,
    InvoiceStats,
    InvoiceStatus,
    InvoiceStatusUpdate,
)
from zervos.schemas.notification import (
    ALL_CATEGORIES,
    CategoryFilter,
    NotificationCategory,
    NotificationCountResponse,
    NotificationCreate,
    NotificationRecord,
    PopupNotification,
    category_icon,
    category_style,
)
from zervos.schemas.team import SalesCall, TeamMember
from zervos.schemas.time_slot import TimeSlot, TimeSlotSummary
from zervos.schemas.workspace import (
    CompanyProfile,
    OrganizationProfile,
    Workspace,
    WorkspaceSelection,
    WorkspaceStatus,
    workspace_initials,
)

__all__ = [
    "ALL_CATEGORIES",
    "CategoryFilter",
    "CompanyProfile",
    "Invoice",
    "InvoiceCompany",
    "InvoiceCreate",
    "InvoiceCustomer",
    "InvoiceEmailLog",
    "InvoiceServiceLine",
    "InvoiceStats",
    "InvoiceStatus",
    "InvoiceStatusUpdate",
    "NotificationCategory",
    "NotificationCountResponse",
    "NotificationCreate",
    "NotificationRecord",
    "OrganizationProfile",
    "PopupNotification",
    "SalesCall",
    "TeamMember",
    "TimeSlot",
    "TimeSlotSummary",
    "Workspace",
    "WorkspaceSelection",
    "WorkspaceStatus",
    "category_icon",
    "category_style",
    "workspace_initials",
]
