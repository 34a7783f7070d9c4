"""
Profile stores: where the eligibility service reads user profiles from

Every store notifies its listeners synchronously after a successful write
and before the write returns, so caches are invalidated before the caller
sees the update acknowledged.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from ..exceptions import ProfileNotFound
from ..models.user import UserProfile, apply_profile_changes

logger = logging.getLogger(__name__)

ProfileListener = Callable[[str, List[str]], None]


class ProfileStore(ABC):
    """Base class for profile stores"""

    def __init__(self):
        self._listeners: List[ProfileListener] = []

    def add_listener(self, listener: ProfileListener):
        """Register a callback receiving (user_id, changed_fields) after each write"""
        self._listeners.append(listener)

    def _notify(self, user_id: str, changed_fields: List[str]):
        for listener in self._listeners:
            listener(user_id, changed_fields)

    @abstractmethod
    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Raises:
            ProfileNotFound: if the user has no stored profile
        """

    @abstractmethod
    async def _write(self, user_id: str, profile: UserProfile):
        """Persist a validated profile"""

    async def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Create or replace a profile; every field counts as changed"""
        await self._write(user_id, profile)
        self._notify(user_id, list(profile.model_dump(exclude_none=True)))
        return profile

    async def update_profile(self, user_id: str, changes: Dict[str, Any]) -> UserProfile:
        """
        Apply a partial update to a stored profile

        Args:
            user_id: Owner of the profile
            changes: Fields to change (snake_case or camelCase keys)

        Returns:
            The updated profile
        """
        current = await self.get_profile(user_id)
        updated, changed = apply_profile_changes(current, changes)
        if not changed:
            return current
        await self._write(user_id, updated)
        self._notify(user_id, changed)
        logger.info(f"Profile updated for user {user_id}: {', '.join(changed)}")
        return updated


class InMemoryProfileStore(ProfileStore):

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self._profiles: Dict[str, UserProfile] = {}

    async def get_profile(self, user_id: str) -> UserProfile:
        with self._lock:
            profile = self._profiles.get(user_id)
        if profile is None:
            raise ProfileNotFound(user_id)
        return profile

    async def _write(self, user_id: str, profile: UserProfile):
        with self._lock:
            self._profiles[user_id] = profile


class MongoProfileStore(ProfileStore):
    """Profiles kept in the ``users`` collection as ``{user_id, profile, ...}``"""

    def __init__(self, mongo):
        super().__init__()
        self.mongo = mongo

    async def get_profile(self, user_id: str) -> UserProfile:
        doc = await self.mongo.get_user(user_id)
        if not doc or not doc.get("profile"):
            raise ProfileNotFound(user_id)
        return UserProfile.model_validate(doc["profile"])

    async def _write(self, user_id: str, profile: UserProfile):
        await self.mongo.upsert_user_profile(user_id, profile.model_dump(mode="json", exclude_none=True))
