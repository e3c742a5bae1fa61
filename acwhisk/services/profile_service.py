"""
Profile Service - Reading and editing user profiles.

This provides:
1. The caller's own profile, with the login timestamp refreshed on read
2. First-contact profile creation from token identity
3. Public projections of other users' profiles
4. Self-service edits that can never touch identity or graph fields
"""

from typing import Any, Dict, List, Optional

from acwhisk.config import settings
from acwhisk.core.exceptions import InvalidArgumentError, NotFoundError
from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import is_valid_uuid, utc_now_iso
from acwhisk.models.normalizer import normalize_profile
from acwhisk.models.user import UserProfile
from acwhisk.repositories.user_repository import UserRepository
from acwhisk.services.base import BaseService

PROTECTED_FIELDS = frozenset(
    {
        "id",
        "email",
        "followers",
        "following",
        "status",
        "role",
        "created_at",
        "last_login",
        "has_temp_password",
    }
)


class ProfileService(BaseService):
    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.user_repo = UserRepository(store)

    async def get_own_profile(self, user_id: str) -> UserProfile:
        """
        Get the caller's profile and stamp ``last_login``.

        Raises:
            NotFoundError: No profile stored for the caller
        """
        self._log_operation("get_own_profile", user_id=user_id)

        try:
            profile = await self.user_repo.get(user_id)
            if profile is None:
                raise NotFoundError("Profile not found")

            profile.last_login = utc_now_iso()
            await self.user_repo.save(profile)
            return profile

        except Exception as error:
            self._handle_service_error(error, "get profile")

    async def ensure_profile(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> UserProfile:
        """Return the caller's profile, creating it from token identity on first contact."""
        self._log_operation("ensure_profile", user_id=user_id)

        try:
            existing = await self.user_repo.get(user_id)
            if existing is not None:
                return existing

            now = utc_now_iso()
            profile = normalize_profile(
                {
                    "id": user_id,
                    "email": email,
                    "name": name or (email or "").split("@")[0],
                    "role": role,
                    "created_at": now,
                    "last_login": now,
                },
                user_id,
            )
            await self.user_repo.save(profile)

            self.logger.info(f"Profile created: {user_id}")
            return profile

        except Exception as error:
            self._handle_service_error(error, "create profile")

    async def get_public_profile(self, user_id: str) -> Dict[str, Any]:
        """Another user's profile, reduced to the publicly visible fields."""
        self._log_operation("get_public_profile", user_id=user_id)

        try:
            if not is_valid_uuid(user_id):
                raise InvalidArgumentError("Invalid user ID format")

            profile = await self.user_repo.get(user_id)
            if profile is None:
                raise NotFoundError("User not found")
            return profile.public_view()

        except Exception as error:
            self._handle_service_error(error, "get user profile")

    async def update_own_profile(self, user_id: str, updates: Dict[str, Any]) -> UserProfile:
        """
        Merge ``updates`` onto the caller's profile.

        Protected fields in ``updates`` are ignored. The merged record goes
        back through the normalizer, so wrongly typed values fall back to
        their defaults instead of being stored.
        """
        self._log_operation("update_own_profile", user_id=user_id, fields=sorted(updates))

        try:
            current = await self.user_repo.get(user_id)
            if current is None:
                raise NotFoundError("Profile not found")

            record = current.to_record()
            for field, value in updates.items():
                if field not in PROTECTED_FIELDS:
                    record[field] = value

            profile = normalize_profile(record, user_id)
            await self.user_repo.save(profile)
            return profile

        except Exception as error:
            self._handle_service_error(error, "update profile")

    async def list_users(self, user_id: str) -> List[Dict[str, Any]]:
        """Public projections of every stored profile, capped at ``user_list_limit``."""
        self._log_operation("list_users", user_id=user_id)

        try:
            users = await self.user_repo.get_valid_users(limit=settings.user_list_limit)
            return [user.public_view() for user in users]

        except Exception as error:
            self._handle_service_error(error, "list users")
