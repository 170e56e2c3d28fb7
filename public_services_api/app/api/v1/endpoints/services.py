"""
Service catalog endpoints for API v1.

Reads are public.  Creating a service requires authentication; editing
and deleting additionally require the caller to own the service.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from public_services_api.app.core.security import (
    Identity,
    get_current_identity,
    get_optional_identity,
    require_identity,
)
from public_services_api.app.schemas.service import ServiceCreate, ServiceUpdate
from public_services_api.app.services.catalog_service import CatalogService
from public_services_api.app.services.user_service import UserService


router = APIRouter()


@router.post("", summary="Create a service")
async def create_service(
    data: ServiceCreate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Create a service owned by the caller's institution.

    The owner is the caller's linked institution or, if none is linked,
    the caller's user id.  A body ``institutionId`` naming any other
    owner is refused with 403.  ``rating`` and ``reviewCount`` start at 0.
    """
    service = await CatalogService.create_service(data, identity)
    return {"success": True, "service": service.to_record()}


@router.get("", summary="List services")
async def list_services(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, category or description"),
    category: Optional[str] = Query(None, description="Exact category; 'all' disables the filter"),
    mine: bool = Query(False, description="Only services owned by the caller (requires auth)"),
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Dict[str, Any]:
    """Return every service matching the filters.  Results are not paginated."""
    owner_id = None
    if mine:
        owner_id = await UserService.owner_id(require_identity(identity))
    services = await CatalogService.list_services(search=search, category=category, owner_id=owner_id)
    return {"services": [s.to_record() for s in services]}


# Declared before "/{service_id}" so the literal path wins.
@router.delete("/clean-no-images", summary="Delete services without an image")
async def clean_services_without_image(
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    deleted = await CatalogService.clean_services_without_image(identity)
    return {"success": True, "deletedCount": deleted}


@router.get("/{service_id}", summary="Get a service")
async def get_service(service_id: str) -> Dict[str, Any]:
    service = await CatalogService.get_service(service_id)
    return {"service": service.to_record()}


@router.put("/{service_id}", summary="Update a service")
async def update_service(
    service_id: str,
    updates: ServiceUpdate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Merge the given fields into the service.

    Fields absent from the body keep their stored value.  The rating
    fields cannot be changed here.
    """
    service = await CatalogService.update_service(service_id, updates, identity)
    return {"success": True, "service": service.to_record()}


@router.delete("/{service_id}", summary="Delete a service")
async def delete_service(
    service_id: str,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Delete a service.  Its appointments and reviews are not removed."""
    await CatalogService.delete_service(service_id, identity)
    return {"success": True}
