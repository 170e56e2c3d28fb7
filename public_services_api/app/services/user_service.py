"""
Business logic for users.

Signup is a two-step sequence: the identity gateway registers the
credentials, then the profile record is written.  If the second
write fails the credentials are not removed; the caller sees the
error and the profile can be recreated later.
"""

import logging
from typing import Any, Dict, Optional

from . import repositories
from ..core.security import Identity, IdentityGateway, require_identity
from ..schemas.base import utc_now_iso
from ..schemas.user import LoginRequest, SignupRequest, UserProfile


logger = logging.getLogger(__name__)


class UserService:
    """Signup, login and profile lookup."""

    @classmethod
    async def signup(cls, data: SignupRequest, gateway: IdentityGateway) -> UserProfile:
        """Register credentials and create the matching profile.

        Institution accounts start with ``institution_id`` equal to
        their own user id, so services they create before registering
        an institution are still attributed to them.
        """
        identity = gateway.register(data.email, data.password, data.name, data.account_type)
        profile = UserProfile(
            id=identity.user_id,
            email=identity.email,
            name=data.name,
            account_type=data.account_type,
            institution_id=identity.user_id if data.account_type == "institution" else None,
            favorites=[],
            created_at=utc_now_iso(),
        )
        repositories.users().create(profile)
        logger.info("Created %s profile %s", profile.account_type, profile.id)
        return profile

    @classmethod
    async def login(cls, data: LoginRequest, gateway: IdentityGateway) -> Dict[str, Any]:
        token = gateway.authenticate(data.email, data.password)
        identity = gateway.resolve(token)
        profile = repositories.users().find(identity.user_id) if identity else None
        return {
            "accessToken": token,
            "tokenType": "bearer",
            "profile": profile.to_record() if profile else None,
        }

    @classmethod
    async def get_profile(cls, identity: Optional[Identity]) -> UserProfile:
        identity = require_identity(identity)
        return repositories.users().get(identity.user_id)

    @classmethod
    async def owner_id(cls, identity: Identity) -> str:
        """Id that services owned by the caller carry in ``institutionId``.

        Falls back to the raw user id when the caller has no profile or
        never had an institution linked.
        """
        profile = repositories.users().find(identity.user_id)
        return profile.owner_id if profile else identity.user_id
