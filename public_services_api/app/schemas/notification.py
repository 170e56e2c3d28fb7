"""
Pydantic models for user notifications.

Notifications are created either by the appointment side effect or
directly through the API.  The only mutation allowed afterwards is
flipping ``read``.
"""

from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel, Record


NotificationType = Literal["appointment", "review", "reminder", "system"]


class Notification(Record):
    """Notification stored under ``notification:<id>``."""

    user_id: str
    type: NotificationType = "system"
    title: str
    message: str = ""
    read: bool = False
    created_at: str
    # Loose reference, usually an appointment id.  Never validated.
    related_id: Optional[str] = None


class NotificationCreate(CamelModel):
    # Defaults to the caller.
    user_id: Optional[str] = None
    type: NotificationType = "system"
    title: str = Field(..., min_length=1)
    message: str = ""
    related_id: Optional[str] = None
