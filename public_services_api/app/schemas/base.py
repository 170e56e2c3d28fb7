"""Shared base classes for records and request payloads."""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    """Current UTC time as ``2025-01-31T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Record(CamelModel):
    """A whole record as stored under ``<prefix>:<id>``."""

    id: str

    def to_record(self) -> Dict[str, Any]:
        """Serialise for storage and API responses.

        Unset optionals are dropped rather than written as ``null``.
        """
        return self.model_dump(by_alias=True, exclude_none=True)
