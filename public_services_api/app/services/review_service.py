"""
Business logic for reviews.

Reviews are immutable.  Creating one is a two-step sequence: the
review is stored, then the reviewed service's rating is recomputed.
If the recompute fails the review stays stored and the failure is
logged; the next review of the same service recomputes the rating
from scratch and brings it back in line.
"""

import logging
from typing import List, Optional, Tuple

from . import repositories
from .aggregation_service import AggregationService
from ..core.ids import generate_id
from ..core.security import Identity, require_identity
from ..schemas.base import utc_now_iso
from ..schemas.review import Review, ReviewCreate
from ..schemas.service import Service


logger = logging.getLogger(__name__)


class ReviewService:
    """Service for handling service reviews."""

    @classmethod
    async def create_review(
        cls,
        data: ReviewCreate,
        identity: Optional[Identity],
    ) -> Tuple[Review, Optional[Service]]:
        """Store a review and refresh the service rating.

        Returns the review and the service as updated by the recompute,
        or ``None`` for the service when it does not exist or the
        recompute failed.
        """
        identity = require_identity(identity)
        review = Review(
            id=generate_id(),
            user_id=identity.user_id,
            service_id=data.service_id,
            rating=data.rating,
            comment=data.comment or "",
            created_at=utc_now_iso(),
        )
        repositories.reviews().create(review)
        logger.info(
            "User %s submitted review %s for service %s", identity.user_id, review.id, data.service_id
        )

        try:
            service = await AggregationService.recompute_service_rating(data.service_id)
        except Exception:
            logger.exception("Rating recompute failed for service %s", data.service_id)
            service = None
        return review, service

    @classmethod
    async def list_reviews(cls, service_id: str) -> List[Review]:
        """Return every review of a service, newest first."""
        items = repositories.reviews().list(lambda r: r.service_id == service_id)
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items
