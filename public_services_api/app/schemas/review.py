"""
Pydantic schemas for service reviews.

Reviews are immutable once created.  Creating one triggers a full
recomputation of the reviewed service's rating.
"""

from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, Record


class Review(Record):
    """Review stored under ``review:<id>``."""

    user_id: str
    service_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: str


class ReviewCreate(CamelModel):
    """Schema for creating a new review."""

    service_id: str = Field(..., min_length=1, description="Identifier of the service being reviewed")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: Optional[str]) -> str:
        """Trim whitespace from the comment and enforce a maximum length."""
        if v is None:
            return ""
        v = v.strip()
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v
