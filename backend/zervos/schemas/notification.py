"""Pydantic schemas for notifications and popups."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal, assert_never

from pydantic import BaseModel, Field, field_validator

from zervos.schemas.shared import CamelModel


class NotificationCategory(str, Enum):
    BOOKINGS = "bookings"
    INVOICES = "invoices"
    POS = "pos"
    SYSTEM = "system"


ALL_CATEGORIES = "all"
CategoryFilter = NotificationCategory | Literal["all"]


def category_icon(category: NotificationCategory) -> str:
    """Icon name shown next to a notification of ``category``."""
    match category:
        case NotificationCategory.BOOKINGS:
            return "calendar"
        case NotificationCategory.INVOICES:
            return "file-text"
        case NotificationCategory.POS:
            return "shopping-cart"
        case NotificationCategory.SYSTEM:
            return "check-circle"
        case _:
            assert_never(category)


def category_style(category: NotificationCategory) -> str:
    """Popup background and border classes for ``category``."""
    match category:
        case NotificationCategory.BOOKINGS:
            return "bg-blue-50 border-blue-200"
        case NotificationCategory.INVOICES:
            return "bg-green-50 border-green-200"
        case NotificationCategory.POS:
            return "bg-purple-50 border-purple-200"
        case NotificationCategory.SYSTEM:
            return "bg-slate-50 border-slate-200"
        case _:
            assert_never(category)


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    body: str | None = Field(default=None, max_length=1000)
    category: NotificationCategory = NotificationCategory.SYSTEM
    path: str | None = Field(default=None, max_length=2048)


class NotificationRecord(CamelModel):
    id: str
    title: str
    body: str | None = None
    category: NotificationCategory
    path: str | None = None
    date: datetime
    read: bool = False

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps would not sort against aware ones
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class PopupNotification(NotificationRecord):
    popup_id: str


class NotificationCountResponse(BaseModel):
    unread_count: int
