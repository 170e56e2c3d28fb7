"""
Appointment endpoints for API v1.

All routes require authentication.  Booking an appointment also
creates an ``appointment`` notification for the caller; if that
second write fails the booking still succeeds.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.schemas.appointment import AppointmentCreate, AppointmentStatusUpdate
from public_services_api.app.services.appointment_service import AppointmentService


router = APIRouter()


@router.post("", summary="Book an appointment")
async def create_appointment(
    data: AppointmentCreate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Create an appointment with status ``pending`` for the caller."""
    appointment = await AppointmentService.create_appointment(data, identity)
    return {"success": True, "appointment": appointment.to_record()}


@router.get("", summary="List appointments")
async def list_appointments(
    institution: bool = Query(False, description="List bookings for services the caller owns"),
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    appointments = await AppointmentService.list_appointments(identity, as_institution=institution)
    return {"appointments": [a.to_record() for a in appointments]}


@router.put("/{appointment_id}", summary="Change an appointment's status")
async def update_appointment(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Set ``status`` to ``pending``, ``confirmed``, ``cancelled`` or ``completed``.

    Either the client who booked or the owning institution may do this.
    """
    appointment = await AppointmentService.update_status(appointment_id, data, identity)
    return {"success": True, "appointment": appointment.to_record()}
