"""
Social Graph Service - Follow/unfollow semantics over independently stored profiles.

Each user's ``following`` and ``followers`` lists live in that user's own
record, so every edge change is a dual write (actor first, then target). There
is no rollback: a failure between the two writes leaves a one-sided edge,
which the next follow/unfollow between the same pair repairs.
"""

from typing import Any, Dict, List, Tuple

from acwhisk.core.exceptions import InvalidArgumentError, NotFoundError
from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import is_valid_uuid
from acwhisk.models.user import UserProfile
from acwhisk.repositories.user_repository import UserRepository
from acwhisk.services.base import BaseService


class SocialGraphService(BaseService):
    """
    Social graph service handling follow relationships.

    Business rules:
    - Target id must be a valid UUID with a stored profile
    - Users cannot follow themselves
    - Follow and unfollow are idempotent
    """

    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.user_repo = UserRepository(store)

    async def follow(self, actor_id: str, target_id: str) -> bool:
        """
        Make ``actor_id`` follow ``target_id``.

        Returns:
            True if the edge was new, False if it already existed

        Raises:
            InvalidArgumentError: Malformed target id, or following yourself
            NotFoundError: Target profile does not exist
        """
        self._log_operation("follow", actor_id=actor_id, target_id=target_id)

        try:
            actor, target = await self._load_pair(actor_id, target_id)
            created = target_id not in actor.following

            if created:
                actor.following.append(target_id)
            # Re-applied on every call so a one-sided edge left by an
            # interrupted earlier write gets completed
            if actor_id not in target.followers:
                target.followers.append(actor_id)

            await self.user_repo.save(actor)
            await self.user_repo.save(target)

            if created:
                self.logger.info(f"Follow created: {actor_id} -> {target_id}")
            else:
                self.logger.info(f"Follow already exists: {actor_id} -> {target_id}")
            return created

        except Exception as error:
            self._handle_service_error(error, "follow user")

    async def unfollow(self, actor_id: str, target_id: str) -> bool:
        """
        Remove the ``actor_id`` -> ``target_id`` edge from both records.

        Returns:
            True if an edge was removed, False if there was none
        """
        self._log_operation("unfollow", actor_id=actor_id, target_id=target_id)

        try:
            actor, target = await self._load_pair(actor_id, target_id)
            removed = target_id in actor.following or actor_id in target.followers

            actor.following = [id for id in actor.following if id != target_id]
            target.followers = [id for id in target.followers if id != actor_id]

            await self.user_repo.save(actor)
            await self.user_repo.save(target)

            if removed:
                self.logger.info(f"Unfollow successful: {actor_id} -> {target_id}")
            return removed

        except Exception as error:
            self._handle_service_error(error, "unfollow user")

    async def is_mutual_follow(self, user_a: str, user_b: str) -> bool:
        """True iff each user lists the other in their own ``following``."""
        a = await self.user_repo.get_or_default(user_a)
        b = await self.user_repo.get_or_default(user_b)
        return a.is_following(user_b) and b.is_following(user_a)

    async def follow_status(self, actor_id: str, target_id: str) -> Dict[str, bool]:
        """Both directions of the relationship, read independently per side."""
        self._log_operation("follow_status", actor_id=actor_id, target_id=target_id)

        try:
            if not is_valid_uuid(target_id):
                raise InvalidArgumentError("Invalid user ID")

            actor = await self.user_repo.get_or_default(actor_id)
            target = await self.user_repo.get_or_default(target_id)
            follows_target = actor.is_following(target_id)
            followed_back = target.is_following(actor_id)

            return {
                "current_user_follows_target": follows_target,
                "target_follows_current_user": followed_back,
                "mutual_follow": follows_target and followed_back,
            }

        except Exception as error:
            self._handle_service_error(error, "check follow status")

    async def get_following(self, user_id: str) -> List[Dict[str, Any]]:
        """
        List who ``user_id`` follows.

        Raises:
            InvalidArgumentError: Malformed user id
            NotFoundError: No such profile
        """
        self._log_operation("get_following", user_id=user_id)

        try:
            if not is_valid_uuid(user_id):
                raise InvalidArgumentError("Invalid user ID")

            profile = await self.user_repo.get(user_id)
            if profile is None:
                raise NotFoundError("User not found")

            return [
                {"following_id": following_id}
                for following_id in profile.following
                if is_valid_uuid(following_id)
            ]

        except Exception as error:
            self._handle_service_error(error, "get following list")

    async def _load_pair(
        self, actor_id: str, target_id: str
    ) -> Tuple[UserProfile, UserProfile]:
        if not is_valid_uuid(target_id):
            raise InvalidArgumentError("Invalid user ID", {"field": "target_user_id"})
        if target_id == actor_id:
            raise InvalidArgumentError("Cannot follow or unfollow yourself")

        target = await self.user_repo.get(target_id)
        if target is None:
            raise NotFoundError("User not found")

        actor = await self.user_repo.get_or_default(actor_id)
        return actor, target
