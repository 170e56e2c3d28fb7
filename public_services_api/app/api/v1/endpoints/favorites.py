"""Favorite services of the current user."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import Field

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.schemas.base import CamelModel
from public_services_api.app.services.favorites_service import FavoritesService


router = APIRouter()


class FavoriteToggle(CamelModel):
    service_id: str = Field(..., min_length=1)


@router.post("", summary="Add or remove a favorite")
async def toggle_favorite(
    data: FavoriteToggle,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Toggle a service in the caller's favorites.

    Returns the resulting list of favorite service ids.
    """
    favorites = await FavoritesService.toggle(data.service_id, identity)
    return {"success": True, "favorites": favorites}


@router.get("", summary="List favorite services")
async def list_favorites(
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    services = await FavoritesService.list_favorites(identity)
    return {"favorites": [s.to_record() for s in services]}
