"""
User endpoints for API v1.

Signup creates credentials with the identity gateway and the user's
profile record.  Login exchanges credentials for a bearer token that
all authenticated routes expect in the ``Authorization`` header.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from public_services_api.app.core.security import (
    Identity,
    IdentityGateway,
    get_current_identity,
    get_identity_gateway,
)
from public_services_api.app.schemas.user import LoginRequest, SignupRequest
from public_services_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/signup", summary="Register a client or institution account")
async def signup(
    data: SignupRequest,
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> Dict[str, Any]:
    """Create an identity and its user profile.

    ``accountType`` is ``client`` or ``institution`` (``type`` is
    accepted as an alias).  Returns the created profile.
    """
    profile = await UserService.signup(data, gateway)
    return {"success": True, "user": profile.to_record()}


@router.post("/login", summary="Obtain a bearer token")
async def login(
    data: LoginRequest,
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> Dict[str, Any]:
    """Exchange email and password for an access token.

    Invalid credentials return 401.
    """
    result = await UserService.login(data, gateway)
    return {"success": True, **result}


@router.get("/profile", summary="Current user's profile")
async def get_profile(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Dict[str, Any]:
    profile = await UserService.get_profile(identity)
    return {"profile": profile.to_record()}
