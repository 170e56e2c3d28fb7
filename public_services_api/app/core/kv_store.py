"""
Key-value store abstraction.

The store is the only persistence primitive of the application.  It
supports point reads and writes plus a prefix scan that is used to
emulate "list every record of a type".  There are no transactions and
no compare-and-swap: repositories perform plain read-modify-write
sequences on top of it.

Two backends are provided:

* ``SQLiteKVStore`` keeps JSON documents in the ``kv_store`` table
  created by :func:`app.core.db.init_db`.
* ``InMemoryKVStore`` keeps them in a process-local dict; useful for
  tests and throwaway deployments.

Backend failures are re-raised as :class:`StoreError`.
"""

import copy
import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from .config import settings
from .db import get_cursor, init_db
from .exceptions import StoreError


logger = logging.getLogger(__name__)


class KVStore(ABC):
    """Interface implemented by all key-value backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any]) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``.  Deleting a missing key is not an error."""

    @abstractmethod
    def scan_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """Return every value whose key starts with ``prefix``.

        Order is unspecified.
        """

    def mget(self, keys: Iterable[str]) -> List[Dict[str, Any]]:
        """Return the values of ``keys`` that exist, in the given order."""
        values = []
        for key in keys:
            value = self.get(key)
            if value is not None:
                values.append(value)
        return values

    def mdelete(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.delete(key)


def _escape_like(prefix: str) -> str:
    return prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteKVStore(KVStore):
    """Key-value store persisted in a SQLite table.

    A new connection is opened for every operation, so an instance can
    be shared between requests and threads.
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url
        try:
            init_db(database_url)
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialise key-value store: {e}") from e

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            with get_cursor(self.database_url) as cursor:
                row = cursor.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {key}: {e}") from e
        if not row:
            return None
        return json.loads(row["value"])

    def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Value for {key} is not JSON serialisable: {e}") from e
        try:
            with get_cursor(self.database_url) as cursor:
                cursor.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            with get_cursor(self.database_url) as cursor:
                cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {key}: {e}") from e

    def scan_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        try:
            with get_cursor(self.database_url) as cursor:
                rows = cursor.execute(
                    "SELECT key, value FROM kv_store WHERE key LIKE ? ESCAPE '\\'",
                    (_escape_like(prefix) + "%",),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to scan prefix {prefix}: {e}") from e
        # LIKE ignores ASCII case, keys do not.
        return [json.loads(row["value"]) for row in rows if row["key"].startswith(prefix)]

    def mdelete(self, keys: Iterable[str]) -> None:
        params = [(key,) for key in keys]
        if not params:
            return
        try:
            with get_cursor(self.database_url) as cursor:
                cursor.executemany("DELETE FROM kv_store WHERE key = ?", params)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {len(params)} keys: {e}") from e


class InMemoryKVStore(KVStore):
    """Dict-backed key-value store.

    Values are deep-copied on the way in and on the way out, so callers
    can mutate what they read without touching the stored record.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            value = self._data.get(key)
            return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def scan_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(value)
                for key, value in self._data.items()
                if key.startswith(prefix)
            ]

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)


_store: Optional[KVStore] = None
_store_lock = threading.Lock()


def create_kv_store(backend: Optional[str] = None, database_url: Optional[str] = None) -> KVStore:
    """Build a store for the given backend name (``sqlite`` or ``memory``)."""
    backend = (backend or settings.kv_backend).lower()
    if backend == "memory":
        return InMemoryKVStore()
    if backend == "sqlite":
        return SQLiteKVStore(database_url)
    raise ValueError(f"Unsupported key-value backend: {backend}")


def get_kv_store() -> KVStore:
    """Return the process-wide store, creating it on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = create_kv_store()
            logger.info("Using %s key-value store", type(_store).__name__)
        return _store


def set_kv_store(store: Optional[KVStore]) -> None:
    """Replace the process-wide store.  ``None`` resets it."""
    global _store
    with _store_lock:
        _store = store


def reset_kv_store() -> None:
    set_kv_store(None)
