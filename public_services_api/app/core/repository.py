"""
Typed CRUD views over the key-value store.

A ``Repository`` binds an entity prefix (``service``, ``review``, ...)
to a record model.  Records are stored whole under ``<prefix>:<id>``;
listing is a prefix scan followed by an in-memory filter and is never
paginated.

Updates use merge semantics: the whole updates mapping is shallow
merged into the stored record, ``updatedAt`` is refreshed and the
result is written back.  There is no locking, so two concurrent
read-modify-write sequences on the same key resolve as last write
wins.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .exceptions import NotFoundError, StoreError
from .kv_store import KVStore
from ..schemas.base import Record, utc_now_iso


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


class Repository(Generic[RecordT]):
    """CRUD access to one entity type."""

    def __init__(
        self,
        store: KVStore,
        prefix: str,
        model: Type[RecordT],
        label: Optional[str] = None,
    ) -> None:
        self.store = store
        self.prefix = prefix
        self.model = model
        self.label = label or prefix.capitalize()

    def key(self, record_id: str) -> str:
        return f"{self.prefix}:{record_id}"

    def _load(self, raw: Dict[str, Any]) -> RecordT:
        try:
            return self.model.model_validate(raw)
        except PydanticValidationError as e:
            raise StoreError(f"Stored {self.label.lower()} {raw.get('id')} is malformed: {e}") from e

    def find(self, record_id: str) -> Optional[RecordT]:
        raw = self.store.get(self.key(record_id))
        if raw is None:
            return None
        return self._load(raw)

    def get(self, record_id: str) -> RecordT:
        record = self.find(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} not found")
        return record

    def create(self, record: RecordT) -> RecordT:
        self.store.set(self.key(record.id), record.to_record())
        return record

    def save(self, record: RecordT) -> RecordT:
        """Write back a record that was loaded and changed in memory."""
        self.store.set(self.key(record.id), record.to_record())
        return record

    def update(self, record_id: str, updates: Mapping[str, Any]) -> RecordT:
        """Merge ``updates`` (camelCase keys) into the stored record."""
        raw = self.store.get(self.key(record_id))
        if raw is None:
            raise NotFoundError(f"{self.label} not found")
        merged = {**raw, **dict(updates), "id": record_id, "updatedAt": utc_now_iso()}
        try:
            record = self.model.model_validate(merged)
        except PydanticValidationError as e:
            raise StoreError(f"Invalid update for {self.label.lower()} {record_id}: {e}") from e
        self.store.set(self.key(record_id), record.to_record())
        return record

    def delete(self, record_id: str) -> None:
        self.store.delete(self.key(record_id))

    def list(self, predicate: Optional[Callable[[RecordT], bool]] = None) -> List[RecordT]:
        """Return every record of this type matching ``predicate``.

        Stored values that no longer validate are logged and skipped so
        one bad record cannot break a listing.
        """
        records: List[RecordT] = []
        for raw in self.store.scan_by_prefix(f"{self.prefix}:"):
            try:
                record = self.model.model_validate(raw)
            except PydanticValidationError:
                logger.warning("Skipping malformed %s record %s", self.prefix, raw.get("id"))
                continue
            if predicate is None or predicate(record):
                records.append(record)
        return records
