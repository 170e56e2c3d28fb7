"""
Institution endpoints for API v1.

Listing and fetching institutions is public; creating one requires
authentication and links the new institution to the caller's profile.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.schemas.institution import InstitutionCreate
from public_services_api.app.services.institution_service import InstitutionService


router = APIRouter()


@router.post("", summary="Create an institution")
async def create_institution(
    data: InstitutionCreate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    institution = await InstitutionService.create_institution(data, identity)
    return {"success": True, "institution": institution.to_record()}


@router.get("", summary="List institutions")
async def list_institutions() -> Dict[str, Any]:
    institutions = await InstitutionService.list_institutions()
    return {"institutions": [i.to_record() for i in institutions]}


@router.get("/{institution_id}", summary="Get an institution")
async def get_institution(institution_id: str) -> Dict[str, Any]:
    institution = await InstitutionService.get_institution(institution_id)
    return {"institution": institution.to_record()}
