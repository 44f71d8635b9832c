"""Notification API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query

from zervos.core.context import BrowsingContext, get_context
from zervos.schemas.notification import (
    ALL_CATEGORIES,
    NotificationCountResponse,
    NotificationCreate,
    NotificationRecord,
)
from zervos.services.notification_service import NotificationService

router = APIRouter()


def get_notification_service(
    context: BrowsingContext = Depends(get_context),
) -> NotificationService:
    service = NotificationService(context)
    service.initialize()
    return service


@router.get(
    "/",
    response_model=list[NotificationRecord],
    summary="List notifications",
    responses={422: {"description": "Unknown category"}},
)
async def list_notifications(
    category: str = Query(default=ALL_CATEGORIES),
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationRecord]:
    """List notifications newest first, optionally filtered by category."""
    try:
        return service.filter(category)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown category '{category}'") from None


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
)
async def get_unread_count(
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountResponse:
    return NotificationCountResponse(unread_count=service.unread_count())


@router.post(
    "/",
    response_model=NotificationRecord,
    status_code=201,
    summary="Add a notification",
)
async def add_notification(
    data: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRecord:
    return service.add_notification(
        title=data.title, category=data.category, body=data.body, path=data.path
    )


@router.post(
    "/read_all",
    response_model=NotificationCountResponse,
    summary="Mark all notifications as read",
)
async def mark_all_as_read(
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountResponse:
    """Mark every notification read; returns how many were unread."""
    return NotificationCountResponse(unread_count=service.mark_all_read())


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRecord,
    summary="Mark a notification as read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_as_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRecord:
    updated = service.mark_read(notification_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return updated


@router.delete("/", status_code=204, summary="Clear all notifications")
async def clear_notifications(
    service: NotificationService = Depends(get_notification_service),
) -> None:
    service.clear_all()
