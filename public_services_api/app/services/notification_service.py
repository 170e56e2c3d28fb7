"""
Business logic for notifications.

Besides the CRUD operations exposed through the API, this module
holds the side effect run after an appointment is booked:
``notify_appointment_created`` writes the companion notification.  It
is called as a separate step after the appointment write and is not
atomic with it.
"""

import logging
from typing import List, Optional

from . import repositories
from ..core.exceptions import PermissionDeniedError
from ..core.ids import generate_id
from ..core.security import Identity, require_identity
from ..schemas.appointment import Appointment
from ..schemas.base import utc_now_iso
from ..schemas.notification import Notification, NotificationCreate


logger = logging.getLogger(__name__)

APPOINTMENT_CREATED_TITLE = "Agendamento Confirmado"
APPOINTMENT_CREATED_MESSAGE = "Seu agendamento para {service_name} foi criado com sucesso!"


class NotificationService:

    @classmethod
    async def notify_appointment_created(cls, appointment: Appointment) -> Notification:
        """Create the ``appointment`` notification for a new booking."""
        notification = Notification(
            id=generate_id(),
            user_id=appointment.user_id,
            type="appointment",
            title=APPOINTMENT_CREATED_TITLE,
            message=APPOINTMENT_CREATED_MESSAGE.format(service_name=appointment.service_name),
            read=False,
            created_at=utc_now_iso(),
            related_id=appointment.id,
        )
        repositories.notifications().create(notification)
        return notification

    @classmethod
    async def create_notification(
        cls,
        data: NotificationCreate,
        identity: Optional[Identity],
    ) -> Notification:
        identity = require_identity(identity)
        notification = Notification(
            id=generate_id(),
            user_id=data.user_id or identity.user_id,
            type=data.type,
            title=data.title,
            message=data.message,
            read=False,
            created_at=utc_now_iso(),
            related_id=data.related_id,
        )
        repositories.notifications().create(notification)
        logger.info(
            "User %s created %s notification %s for %s",
            identity.user_id,
            notification.type,
            notification.id,
            notification.user_id,
        )
        return notification

    @classmethod
    async def list_notifications(cls, identity: Optional[Identity]) -> List[Notification]:
        """Return the caller's notifications, newest first."""
        identity = require_identity(identity)
        items = repositories.notifications().list(lambda n: n.user_id == identity.user_id)
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items

    @classmethod
    async def _get_own(cls, notification_id: str, identity: Identity) -> Notification:
        notification = repositories.notifications().get(notification_id)
        if notification.user_id != identity.user_id:
            raise PermissionDeniedError("Notification belongs to another user")
        return notification

    @classmethod
    async def mark_read(cls, notification_id: str, identity: Optional[Identity]) -> Notification:
        identity = require_identity(identity)
        await cls._get_own(notification_id, identity)
        return repositories.notifications().update(notification_id, {"read": True})

    @classmethod
    async def mark_all_read(cls, identity: Optional[Identity]) -> int:
        """Mark every unread notification of the caller as read.

        Each record is written separately; a failure part way leaves the
        earlier ones marked.  Returns the number of records changed.
        """
        identity = require_identity(identity)
        repository = repositories.notifications()
        unread = repository.list(lambda n: n.user_id == identity.user_id and not n.read)
        for notification in unread:
            notification.read = True
            repository.save(notification)
        return len(unread)

    @classmethod
    async def delete_notification(cls, notification_id: str, identity: Optional[Identity]) -> None:
        identity = require_identity(identity)
        await cls._get_own(notification_id, identity)
        repositories.notifications().delete(notification_id)
