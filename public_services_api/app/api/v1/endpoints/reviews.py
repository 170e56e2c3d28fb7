"""
API endpoints for service reviews.

Any authenticated user may review a service; reviews cannot be edited
or deleted afterwards.  Listing a service's reviews is public.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.schemas.review import ReviewCreate
from public_services_api.app.services.review_service import ReviewService


router = APIRouter()


@router.post("", summary="Submit a review")
async def create_review(
    data: ReviewCreate,
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Create a review and recompute the service rating.

    The response carries the service as it stands after the recompute,
    or ``null`` when the service does not exist.
    """
    review, service = await ReviewService.create_review(data, identity)
    return {
        "success": True,
        "review": review.to_record(),
        "service": service.to_record() if service else None,
    }


@router.get("/{service_id}", summary="List reviews of a service")
async def list_reviews(service_id: str) -> Dict[str, Any]:
    reviews = await ReviewService.list_reviews(service_id)
    return {"reviews": [r.to_record() for r in reviews]}
