"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers (services,
appointments, reviews, etc.) under a unified prefix.  When new
domains are introduced, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    analytics,
    appointments,
    favorites,
    info,
    institutions,
    notifications,
    reviews,
    services,
    users,
)

router = APIRouter()

# The users router defines /signup, /login and /profile itself.
router.include_router(users.router, tags=["users"])
router.include_router(institutions.router, prefix="/institutions", tags=["institutions"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(info.router, prefix="/health", tags=["health"])
