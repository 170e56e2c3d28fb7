"""
Favorites stored on the user profile.

There is a single toggle operation: calling it adds the service when
absent and removes it when present, so two calls in a row leave the
list as it was.  The read-modify-write on the profile is not guarded;
concurrent toggles on the same user resolve as last write wins.
"""

import logging
from typing import List, Optional

from . import repositories
from ..core.security import Identity, require_identity
from ..schemas.service import Service


logger = logging.getLogger(__name__)


def toggle_membership(items: List[str], value: str) -> List[str]:
    """Return ``items`` with the first ``value`` removed if present, else appended."""
    if value in items:
        index = items.index(value)
        return items[:index] + items[index + 1:]
    return [*items, value]


class FavoritesService:

    @classmethod
    async def toggle(cls, service_id: str, identity: Optional[Identity]) -> List[str]:
        """Toggle ``service_id`` in the caller's favorites and return the new list."""
        identity = require_identity(identity)
        users = repositories.users()
        profile = users.get(identity.user_id)
        favorites = toggle_membership(profile.favorites, service_id)
        users.update(identity.user_id, {"favorites": favorites})
        logger.info(
            "User %s %s favorite %s",
            identity.user_id,
            "added" if service_id in favorites else "removed",
            service_id,
        )
        return favorites

    @classmethod
    async def list_favorites(cls, identity: Optional[Identity]) -> List[Service]:
        """Resolve the caller's favorites into service records.

        Ids whose service has since been deleted are skipped.
        """
        identity = require_identity(identity)
        profile = repositories.users().find(identity.user_id)
        favorite_ids = set(profile.favorites) if profile else set()
        if not favorite_ids:
            return []
        return repositories.services().list(lambda s: s.id in favorite_ids)
