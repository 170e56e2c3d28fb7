"""
Business logic for the service catalog.

Services are listed by scanning every ``service:`` record and
filtering in memory: a case-insensitive substring search over name,
category and description, an exact category match and an optional
owner filter.  Results are never paginated.

Only the owning institution may edit or delete a service.  Ownership
compares ``Service.institution_id`` with the caller's owner id, which
is the profile's ``institution_id`` or, when that was never set, the
caller's user id.
"""

import logging
from typing import List, Optional

from . import repositories
from .user_service import UserService
from ..core.exceptions import PermissionDeniedError
from ..core.ids import generate_id
from ..core.security import Identity, require_identity
from ..schemas.base import utc_now_iso
from ..schemas.service import Service, ServiceCreate, ServiceUpdate


logger = logging.getLogger(__name__)


def matches_search(service: Service, search: str) -> bool:
    needle = search.lower()
    return any(
        needle in (value or "").lower()
        for value in (service.name, service.category, service.description)
    )


class CatalogService:
    """CRUD and search over services."""

    @classmethod
    async def create_service(cls, data: ServiceCreate, identity: Optional[Identity]) -> Service:
        identity = require_identity(identity)
        institution_id = await UserService.owner_id(identity)
        if data.institution_id and data.institution_id != institution_id:
            raise PermissionDeniedError("Services can only be created for your own institution")
        service = Service(
            id=generate_id(),
            name=data.name,
            category=data.category,
            description=data.description,
            institution_id=institution_id,
            institution_name=data.institution_name or identity.name,
            location=data.location,
            image=data.image or None,
            rating=0.0,
            review_count=0,
            created_at=utc_now_iso(),
        )
        repositories.services().create(service)
        logger.info("User %s created service %s (%s)", identity.user_id, service.id, service.name)
        return service

    @classmethod
    async def list_services(
        cls,
        search: Optional[str] = None,
        category: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> List[Service]:
        """Return services matching every filter given.

        ``category`` of ``"all"`` (or empty) disables the category filter.
        """
        search = (search or "").strip()
        category = None if category in (None, "", "all") else category

        def predicate(service: Service) -> bool:
            if search and not matches_search(service, search):
                return False
            if category is not None and service.category != category:
                return False
            if owner_id is not None and service.institution_id != owner_id:
                return False
            return True

        return repositories.services().list(predicate)

    @classmethod
    async def get_service(cls, service_id: str) -> Service:
        return repositories.services().get(service_id)

    @classmethod
    async def _get_owned(cls, service_id: str, identity: Identity) -> Service:
        service = repositories.services().get(service_id)
        if service.institution_id != await UserService.owner_id(identity):
            raise PermissionDeniedError("Only the owning institution can change this service")
        return service

    @classmethod
    async def update_service(
        cls,
        service_id: str,
        updates: ServiceUpdate,
        identity: Optional[Identity],
    ) -> Service:
        """Merge the provided fields into the stored service."""
        identity = require_identity(identity)
        await cls._get_owned(service_id, identity)
        changes = updates.model_dump(by_alias=True, exclude_unset=True)
        service = repositories.services().update(service_id, changes)
        logger.info("User %s updated service %s: %s", identity.user_id, service_id, sorted(changes))
        return service

    @classmethod
    async def delete_service(cls, service_id: str, identity: Optional[Identity]) -> None:
        """Delete a service.  Its appointments and reviews are kept."""
        identity = require_identity(identity)
        await cls._get_owned(service_id, identity)
        repositories.services().delete(service_id)
        logger.info("User %s deleted service %s", identity.user_id, service_id)

    @classmethod
    async def clean_services_without_image(cls, identity: Optional[Identity]) -> int:
        """Delete every service lacking an image and return how many went."""
        identity = require_identity(identity)
        repository = repositories.services()
        doomed = repository.list(lambda s: not s.image)
        repository.store.mdelete(repository.key(s.id) for s in doomed)
        logger.info("User %s removed %d services without image", identity.user_id, len(doomed))
        return len(doomed)
