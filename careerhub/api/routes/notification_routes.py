"""
Notification Routes

GET /notifications - Caller's notifications, newest first, senders resolved
PATCH /notifications/{notification_id}/read - Mark one notification read
DELETE /notifications/clear-all - Delete all of the caller's notifications
"""

from fastapi import APIRouter, Depends

from careerhub.api.deps import get_notification_service
from careerhub.core.auth import get_current_user
from careerhub.schemas.schemas import (
    NotificationListResponse, NotificationResponse, ClearNotificationsResponse
)
from careerhub.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user: dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Missed realtime pushes are recovered here."""
    notifications = service.list_for_user(user["user_id"])
    unread = sum(1 for n in notifications if not n["read"])
    return NotificationListResponse(data=notifications, unread=unread)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    user: dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Idempotent. 404 if the notification does not exist or is not the caller's."""
    return service.mark_read(notification_id, user_id=user["user_id"])


@router.delete("/clear-all", response_model=ClearNotificationsResponse)
async def clear_all_notifications(
    user: dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Irreversible."""
    deleted = service.clear_all(user["user_id"])
    return ClearNotificationsResponse(deleted=deleted)
