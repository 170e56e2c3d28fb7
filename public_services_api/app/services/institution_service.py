"""
Business logic for institutions.

Creating an institution writes the institution record and then links
it to the caller's profile.  The two writes are independent: if the
link fails, the institution exists but the profile still points at
its previous owner id.
"""

import logging
from typing import List, Optional

from . import repositories
from ..core.ids import generate_id
from ..core.security import Identity, require_identity
from ..schemas.base import utc_now_iso
from ..schemas.institution import Institution, InstitutionCreate


logger = logging.getLogger(__name__)


class InstitutionService:

    @classmethod
    async def create_institution(
        cls,
        data: InstitutionCreate,
        identity: Optional[Identity],
    ) -> Institution:
        identity = require_identity(identity)
        payload = data.model_dump(by_alias=True, exclude_none=True)
        institution = Institution.model_validate(
            {
                **payload,
                "id": generate_id(),
                "userId": identity.user_id,
                "createdAt": utc_now_iso(),
            }
        )
        repositories.institutions().create(institution)
        logger.info("User %s created institution %s", identity.user_id, institution.id)

        users = repositories.users()
        if users.find(identity.user_id) is not None:
            users.update(identity.user_id, {"institutionId": institution.id})
        else:
            logger.warning(
                "No profile for user %s; institution %s left unlinked",
                identity.user_id,
                institution.id,
            )
        return institution

    @classmethod
    async def list_institutions(cls) -> List[Institution]:
        return repositories.institutions().list()

    @classmethod
    async def get_institution(cls, institution_id: str) -> Institution:
        return repositories.institutions().get(institution_id)
