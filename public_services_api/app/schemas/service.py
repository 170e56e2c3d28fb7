"""
Pydantic models for services offered by institutions.

``rating`` and ``review_count`` are derived from the stored reviews
and are recomputed by the aggregation service whenever a review is
created.  Clients can never set them directly: neither ``ServiceCreate``
nor ``ServiceUpdate`` carries these fields.
"""

from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, Record


# Categories offered in the UI.  ``category`` itself stays free text.
RECOMMENDED_CATEGORIES = (
    "Odontologia",
    "Cardiologia",
    "Ortopedia",
    "Pediatria",
    "Psicologia",
    "Outros",
)


class Service(Record):
    """Service stored under ``service:<id>``."""

    name: str
    category: str = ""
    description: str = ""
    institution_id: str
    # Copied from the institution at creation time; not kept in sync.
    institution_name: str = ""
    location: str = ""
    image: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    created_at: str
    updated_at: Optional[str] = None


class ServiceCreate(CamelModel):
    name: str = Field(..., min_length=1, examples=["Limpeza dental"])
    category: str = Field("Outros", examples=["Odontologia"])
    description: str = ""
    # Must match the caller's own institution when given.
    institution_id: Optional[str] = None
    institution_name: str = ""
    location: str = ""
    image: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ServiceUpdate(CamelModel):
    """Partial update.  Only the fields present in the body are merged."""

    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    institution_name: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
