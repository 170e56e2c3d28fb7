"""
Pydantic models for appointments.

``service_name`` and ``institution_name`` are denormalised copies
taken at booking time.  Status never changes on its own; either the
client or the institution moves it with ``AppointmentStatusUpdate``.
Double-booking the same slot is allowed.
"""

from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel, Record


AppointmentStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class Appointment(Record):
    """Appointment stored under ``appointment:<id>``."""

    user_id: str
    service_id: str
    service_name: str = ""
    institution_name: str = ""
    date: str
    time: str = ""
    status: AppointmentStatus = "pending"
    notes: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


class AppointmentCreate(CamelModel):
    service_id: str = Field(..., min_length=1)
    service_name: str = ""
    institution_name: str = ""
    date: str = Field(..., min_length=1, examples=["2025-11-03"])
    time: str = Field("", examples=["09:30"])
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus
