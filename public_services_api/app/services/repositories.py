"""
Repository factories for every stored entity.

Each function binds an entity prefix to its record model on top of
the process-wide key-value store, so services never spell out key
formats themselves.
"""

from typing import Optional

from ..core.kv_store import KVStore, get_kv_store
from ..core.repository import Repository
from ..schemas.appointment import Appointment
from ..schemas.institution import Institution
from ..schemas.notification import Notification
from ..schemas.review import Review
from ..schemas.service import Service
from ..schemas.user import UserProfile


def users(store: Optional[KVStore] = None) -> Repository[UserProfile]:
    return Repository(store or get_kv_store(), "user", UserProfile, label="User profile")


def institutions(store: Optional[KVStore] = None) -> Repository[Institution]:
    return Repository(store or get_kv_store(), "institution", Institution)


def services(store: Optional[KVStore] = None) -> Repository[Service]:
    return Repository(store or get_kv_store(), "service", Service)


def appointments(store: Optional[KVStore] = None) -> Repository[Appointment]:
    return Repository(store or get_kv_store(), "appointment", Appointment)


def reviews(store: Optional[KVStore] = None) -> Repository[Review]:
    return Repository(store or get_kv_store(), "review", Review)


def notifications(store: Optional[KVStore] = None) -> Repository[Notification]:
    return Repository(store or get_kv_store(), "notification", Notification)
