"""
Business logic for appointments.

Booking is a two-step sequence:

1. the appointment record is written with status ``pending``;
2. the companion notification is created for the booking user.

Step 2 is best effort.  When it fails the error is logged and the
appointment is still reported as created; no notification will exist
for it.  Time slots are not checked for conflicts, so the same slot
can be booked any number of times.
"""

import logging
from typing import List, Optional

from . import repositories
from .notification_service import NotificationService
from .user_service import UserService
from ..core.exceptions import PermissionDeniedError
from ..core.ids import generate_id
from ..core.security import Identity, require_identity
from ..schemas.appointment import Appointment, AppointmentCreate, AppointmentStatusUpdate
from ..schemas.base import utc_now_iso


logger = logging.getLogger(__name__)


class AppointmentService:
    """Service for creating, listing and updating appointments."""

    @classmethod
    async def create_appointment(
        cls,
        data: AppointmentCreate,
        identity: Optional[Identity],
    ) -> Appointment:
        identity = require_identity(identity)
        appointment = Appointment(
            id=generate_id(),
            user_id=identity.user_id,
            service_id=data.service_id,
            service_name=data.service_name,
            institution_name=data.institution_name,
            date=data.date,
            time=data.time,
            status="pending",
            notes=data.notes,
            created_at=utc_now_iso(),
        )
        repositories.appointments().create(appointment)
        logger.info(
            "User %s booked appointment %s for service %s on %s %s",
            identity.user_id,
            appointment.id,
            appointment.service_id,
            appointment.date,
            appointment.time,
        )

        try:
            await NotificationService.notify_appointment_created(appointment)
        except Exception:
            logger.exception("Could not create notification for appointment %s", appointment.id)
        return appointment

    @classmethod
    async def list_appointments(
        cls,
        identity: Optional[Identity],
        as_institution: bool = False,
    ) -> List[Appointment]:
        """List the caller's appointments.

        With ``as_institution`` the appointments booked for services the
        caller owns are returned instead.
        """
        identity = require_identity(identity)
        if not as_institution:
            return repositories.appointments().list(lambda a: a.user_id == identity.user_id)
        owner_id = await UserService.owner_id(identity)
        owned = {s.id for s in repositories.services().list(lambda s: s.institution_id == owner_id)}
        return repositories.appointments().list(lambda a: a.service_id in owned)

    @classmethod
    async def update_status(
        cls,
        appointment_id: str,
        data: AppointmentStatusUpdate,
        identity: Optional[Identity],
    ) -> Appointment:
        """Change an appointment's status.

        Allowed for the client who booked it and for the institution
        owning the booked service.
        """
        identity = require_identity(identity)
        appointment = repositories.appointments().get(appointment_id)
        if appointment.user_id != identity.user_id:
            service = repositories.services().find(appointment.service_id)
            if service is None or service.institution_id != await UserService.owner_id(identity):
                raise PermissionDeniedError("Not allowed to change this appointment")
        updated = repositories.appointments().update(appointment_id, {"status": data.status})
        logger.info(
            "User %s moved appointment %s from %s to %s",
            identity.user_id,
            appointment_id,
            appointment.status,
            updated.status,
        )
        return updated
