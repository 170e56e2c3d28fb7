"""
Notification endpoints for API v1.

Users see and manage only their own notifications.  Marking one as
read or deleting it is refused for notifications of other users.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.schemas.notification import NotificationCreate
from public_services_api.app.services.notification_service import NotificationService


router = APIRouter()


@router.get("", summary="List my notifications")
async def list_notifications(
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Return the caller's notifications, newest first."""
    notifications = await NotificationService.list_notifications(identity)
    return {"notifications": [n.to_record() for n in notifications]}


@router.post("", summary="Create a notification")
async def create_notification(
    data: NotificationCreate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Create a notification, for the caller unless ``userId`` is given."""
    notification = await NotificationService.create_notification(data, identity)
    return {"success": True, "notification": notification.to_record()}


@router.put("/read-all", summary="Mark all my notifications as read")
async def mark_all_read(
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    updated = await NotificationService.mark_all_read(identity)
    return {"success": True, "updatedCount": updated}


@router.put("/{notification_id}/read", summary="Mark a notification as read")
async def mark_read(
    notification_id: str,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    notification = await NotificationService.mark_read(notification_id, identity)
    return {"success": True, "notification": notification.to_record()}


@router.delete("/{notification_id}", summary="Delete a notification")
async def delete_notification(
    notification_id: str,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    await NotificationService.delete_notification(notification_id, identity)
    return {"success": True}
