"""
Pydantic models for institutions.

An institution is the organisation behind one or more services.  Its
record keeps whatever extra fields the creator sent, since the
profile form evolves faster than this API.
"""

from typing import Optional

from pydantic import ConfigDict, Field

from .base import CamelModel, Record


class Institution(Record):
    """Institution stored under ``institution:<id>``."""

    model_config = ConfigDict(extra="allow")

    user_id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: str


class InstitutionCreate(CamelModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, examples=["Clínica Sorriso"])
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
