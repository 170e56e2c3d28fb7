"""
Pydantic models for user data.

A ``UserProfile`` is created on signup next to the identity held by
the identity gateway.  It is never hard-deleted; the favorites toggle
and institution linking mutate it in place.
"""

from typing import List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from .base import CamelModel, Record


AccountType = Literal["client", "institution"]


class UserProfile(Record):
    """Profile stored under ``user:<id>``."""

    email: str
    name: str
    # Older records were written with ``type``; accept both.
    account_type: AccountType = Field(
        "client",
        validation_alias=AliasChoices("accountType", "account_type", "type"),
        serialization_alias="accountType",
    )
    institution_id: Optional[str] = None
    favorites: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: Optional[str] = None

    @property
    def owner_id(self) -> str:
        """Id matched against ``Service.institution_id`` for ownership.

        Institution accounts whose ``institution_id`` was never set fall
        back to their own user id.
        """
        return self.institution_id or self.id


class SignupRequest(CamelModel):
    email: str = Field(..., min_length=3, examples=["maria@example.com"])
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, examples=["Maria Silva"])
    account_type: AccountType = Field(
        "client",
        validation_alias=AliasChoices("accountType", "account_type", "type"),
    )

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()
